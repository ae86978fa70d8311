from __future__ import annotations  # Styled PDF rendering for finished interview sessions

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from interview.state import Question
from storage.history import HistoryRecord

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
SOFT_ACCENT_BG = (243, 248, 255)  # Highlight background


def _format_datetime(value: Optional[datetime]) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %I:%M %p").lstrip("0").replace(" 0", " ")


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


def _score_value(value: Optional[int]) -> str:
    return "N/A" if value is None else f"{value}/100"


class ReportPDF(FPDF):  # PDF with header banner and latin-1 safe text
    def __init__(self, title: str) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self.header_title = title
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"

    def _prepare_text(self, text: object) -> str:  # Coerce text for the core fonts
        value = "" if text is None else str(text)
        cleaned = (
            value.replace("’", "'")
            .replace("“", '"')
            .replace("”", '"')
            .replace("–", "-")
            .replace("—", "-")
            .replace("•", "-")
        )
        return cleaned.encode("latin-1", "ignore").decode("latin-1")

    def cell(self, w=None, h=None, text="", *args, **kwargs):  # Sanitize text before rendering cell
        return super().cell(w, h, self._prepare_text(text), *args, **kwargs)

    def multi_cell(self, w, h=None, text="", *args, **kwargs):  # Sanitize text before multi-cell
        return super().multi_cell(w, h, self._prepare_text(text), *args, **kwargs)

    def header(self) -> None:  # Render header banner
        if self.page_no() == 1:
            self.set_fill_color(*ACCENT)
            self.rect(0, 0, self.w, 22, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self._font_bold, "B", 16)
            self.set_xy(self.l_margin, 7)
            self.cell(0, 8, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_text_color(*TEXT)
            self.set_y(28)
        else:
            self.set_text_color(*MUTED)
            self.set_font(self._font_bold, "B", 11)
            self.set_xy(self.l_margin, 8)
            self.cell(0, 6, self.header_title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            self.set_draw_color(*ACCENT)
            self.set_line_width(0.4)
            self.line(self.l_margin, self.get_y() + 1, self.w - self.r_margin, self.get_y() + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: ReportPDF, title: str) -> None:  # Render styled section title
    pdf.ln(2)
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.cell(0, 9, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: ReportPDF, rows: Sequence[Tuple[str, str]]) -> None:  # Draw two-column metadata
    col = _effective_width(pdf) / 2.0
    for idx in range(0, len(rows), 2):
        left = rows[idx]
        right = rows[idx + 1] if idx + 1 < len(rows) else ("", "")
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(col, 6, left[0], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, 6, right[0], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 11)
        pdf.cell(col, 6, left[1], new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.cell(col, 6, right[1], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)


def _paragraph(pdf: ReportPDF, text: str, *, muted: bool = False) -> None:
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*(MUTED if muted else TEXT))
    pdf.set_font(pdf._font_regular, "", 11)
    pdf.multi_cell(_effective_width(pdf), 6, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*TEXT)


def _bullets(pdf: ReportPDF, items: Sequence[str], empty: str) -> None:  # Render bullet list or placeholder
    if not items:
        _paragraph(pdf, empty, muted=True)
        return
    for item in items:
        _paragraph(pdf, f"- {item}")


def _render_questions(pdf: ReportPDF, questions: List[Question]) -> None:  # Render Q&A with scores
    if not questions:
        _paragraph(pdf, "No questions were asked in this session.", muted=True)
        return
    width = _effective_width(pdf)
    for number, question in enumerate(questions, start=1):
        pdf.set_x(pdf.l_margin)
        pdf.set_fill_color(*SOFT_ACCENT_BG)
        pdf.set_font(pdf._font_bold, "B", 11)
        label = f"Q{number}"
        if question.difficulty:
            label += f" ({question.difficulty})"
        label += f"  Score: {_score_value(question.score)}"
        pdf.cell(width, 7, label, fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        _paragraph(pdf, question.text)
        pdf.set_font(pdf._font_bold, "B", 10)
        pdf.cell(0, 6, "Answer", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        _paragraph(pdf, question.answer or "No answer provided", muted=not question.answer)
        if question.feedback:
            pdf.set_font(pdf._font_bold, "B", 10)
            pdf.cell(0, 6, "Feedback", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            _paragraph(pdf, question.feedback)
        pdf.ln(3)


def generate_session_report_pdf(record: HistoryRecord) -> bytes:  # Render a finished session to PDF bytes
    session = record.session
    pdf = ReportPDF(f"Interview Report: {session.candidate_name or 'Candidate'}")
    pdf.alias_nb_pages()
    pdf.set_auto_page_break(auto=True, margin=16)
    pdf.add_page()

    _meta_block(
        pdf,
        [
            ("Interview type", session.interview_type.title()),
            ("Difficulty", session.difficulty.title()),
            ("Started", _format_datetime(session.start_time)),
            ("Ended", _format_datetime(session.end_time)),
            ("Final score", _score_value(session.final_score)),
            ("Questions", str(len(record.questions))),
        ],
    )

    report = session.report
    _section_title(pdf, "Summary")
    _paragraph(pdf, session.summary or "-")
    if report is not None:
        if report.recommendation:
            _section_title(pdf, "Recommendation")
            _paragraph(pdf, report.recommendation)
        _section_title(pdf, "Strengths")
        _bullets(pdf, report.strengths, "No strengths recorded.")
        _section_title(pdf, "Areas for Improvement")
        _bullets(pdf, report.improvements, "No improvements recorded.")

    _section_title(pdf, "Questions and Answers")
    _render_questions(pdf, record.questions)
    return bytes(pdf.output())


__all__ = ["ReportPDF", "generate_session_report_pdf"]
