"""Fixed local substitutes used whenever the oracle cannot answer."""
from __future__ import annotations

import random
import re
from typing import Dict, List, Optional, Sequence, Tuple

from agents.types import EvalResult, SummaryResult
from interview.scoring import average_score

ROLE_QUESTIONS: List[Tuple[Tuple[str, ...], List[str]]] = [
    (
        ("data scientist", "data-scientist"),
        [
            "Write Python code to calculate the Pearson correlation coefficient between two arrays. Explain what values indicate strong vs weak correlation.",
            "Implement a function to perform train-test split on a dataset. The function should take a dataset and test_size as input and return train and test sets.",
            "Code a function to handle missing data: implement mean imputation for numerical columns and mode imputation for categorical columns.",
            "Write code to calculate precision, recall, and F1-score given true labels and predicted labels arrays.",
            "Implement k-fold cross-validation from scratch. Your function should split data into k folds and return average validation score.",
            "Code a function to normalize features using min-max scaling. Show the formula and implementation.",
            "Write code to detect and remove outliers using the IQR (Interquartile Range) method.",
            "Implement one-hot encoding from scratch without using sklearn. Handle multiple categorical columns.",
        ],
    ),
    (
        ("data engineer", "data-engineer"),
        [
            "Write a SQL query to find duplicate records in a user table based on email address. Show email and count of duplicates, ordered by count descending.",
            "Code a Python function to validate CSV data schema: check for required columns, data types, and null constraints. Return a list of validation errors.",
            "Write a SQL query using window functions to calculate running total of sales per product over time.",
            "Implement a Python class for an ETL pipeline: include methods for extract (read CSV), transform (clean data), and load (write to database).",
            "Write a SQL query to implement slowly changing dimension (SCD) Type 2: track historical changes with start_date, end_date, and is_current flag.",
            "Code a function to read a large Parquet file in chunks and apply transformations without loading entire file into memory.",
            "Write SQL to pivot data: convert rows to columns for monthly sales data (columns should be Jan, Feb, Mar, etc.).",
            "Implement a data quality check function: validate record counts, check for null values, verify referential integrity.",
        ],
    ),
    (
        ("ai", "ml engineer"),
        [
            "Implement a simple perceptron from scratch in Python: include forward pass, activation function, and weight update logic using gradient descent.",
            "Code the sigmoid activation function and its derivative. Explain why the derivative is important for backpropagation.",
            "Write code to implement batch normalization for a neural network layer. Include both forward and backward pass logic.",
            "Implement the ReLU activation function and Leaky ReLU variant. Compare their advantages and disadvantages.",
            "Code a simple CNN architecture for MNIST digit classification using PyTorch or TensorFlow. Include convolutional layers, pooling, and fully connected layers.",
            "Implement dropout regularization from scratch. Show how it works differently during training vs inference.",
            "Write code for the scaled dot-product attention mechanism. Include the formula and explain each component.",
            "Implement early stopping logic for training: monitor validation loss, save best model, and stop if no improvement for N epochs.",
        ],
    ),
    (
        ("frontend",),
        [
            "Implement a debounce function from scratch in JavaScript. Your function should delay execution until after a specified wait time has passed since the last call.",
            "Create a custom React hook called useLocalStorage that syncs component state with localStorage. Include get, set, and remove functionality.",
            "Write code to implement deep cloning of nested objects in JavaScript without using external libraries. Handle arrays, objects, and primitive types.",
            "Implement a function to flatten a deeply nested array. For example: [1, [2, [3, [4]]]] should become [1, 2, 3, 4].",
            "Code a custom useDebounce hook in React that debounces a value. The hook should update the debounced value after a specified delay.",
            "Implement a simple event emitter class: include methods for on (subscribe), off (unsubscribe), and emit (trigger events).",
            "Write a function to implement memoization for expensive function calls. The function should cache results based on input arguments.",
            "Code a virtual DOM diffing algorithm (simplified version): compare two DOM trees and return the minimal set of changes needed.",
        ],
    ),
    (
        ("backend",),
        [
            "Implement a singly linked list class with methods for: insert (at beginning/end), delete (by value), search, and display. Use your preferred language.",
            "Code a LRU (Least Recently Used) Cache with get and put operations that both run in O(1) time complexity. Explain your data structure choice.",
            "Write a function to detect if a linked list has a cycle. Return true if cycle exists, false otherwise. Can you solve it in O(1) space?",
            "Implement a Hash Map from scratch using an array and hash function. Include methods for set, get, and delete with collision handling.",
            "Code a function to reverse a linked list iteratively. Then solve it recursively. Compare the space complexity of both approaches.",
            "Implement a Queue using two Stacks. Include enqueue and dequeue operations and explain the time complexity.",
            "Write code to find the middle element of a linked list in one pass (without counting length first). Use the slow and fast pointer technique.",
            "Implement merge sort for a linked list. Your code should sort the list in O(n log n) time without using extra space for an array.",
        ],
    ),
    (
        ("devops",),
        [
            "Write a Bash script to monitor system health: check CPU usage, memory usage, and disk space. Send alert if any metric exceeds 80%.",
            "Code a Python script to automate Docker container deployment: pull image, stop old container, start new container, run health checks.",
            "Implement a log parsing script in Python: read application logs, extract error messages, group by error type, and generate summary report.",
            "Write a script to backup a PostgreSQL database, compress it, upload to S3, and verify the backup integrity.",
            "Code a monitoring script that collects metrics (CPU, memory, disk I/O) and sends them to Prometheus in the correct format.",
            "Implement a blue-green deployment script: create new infrastructure, run tests, switch traffic, keep old version for quick rollback.",
            "Write a script to scan Docker images for vulnerabilities, generate a report, and fail the pipeline if critical issues are found.",
            "Code a Kubernetes health check endpoint in your preferred language: check database connection, Redis connection, and third-party API availability.",
        ],
    ),
]

GENERIC_QUESTIONS = [
    "Implement a function to reverse a string in your preferred programming language. Can you do it in-place?",
    "Write code to find the second largest element in an array without sorting the entire array.",
    "Implement a function to check if a string is a palindrome. Ignore spaces and punctuation.",
    "Code a function to find all duplicate elements in an array. Return them in a new array.",
    "Write a function to merge two sorted arrays into one sorted array without using extra space.",
    "Implement a basic calculator that can handle addition, subtraction, multiplication, and division with proper operator precedence.",
]

TYPE_QUESTIONS: Dict[str, str] = {
    "technical": "Can you walk me through your approach to solving a complex coding problem? What steps do you typically follow?",
    "behavioral": "Tell me about a challenging project you worked on recently. What made it challenging and how did you handle it?",
    "mixed": "Describe a time when you had to learn a new technology quickly. How did you approach the learning process?",
}


def _bank_for(text: str) -> List[str]:
    lowered = text.lower()
    for needles, bank in ROLE_QUESTIONS:
        if any(re.search(rf"\b{re.escape(needle)}\b", lowered) for needle in needles):
            return bank
    return GENERIC_QUESTIONS


def fallback_question(
    job_description: Optional[str],
    interview_type: str,
    previous: Sequence[str] = (),
    rng: Optional[random.Random] = None,
) -> str:
    """Role-aware canned question, avoiding ones already asked where possible."""

    rng = rng or random.Random()
    if interview_type == "behavioral":
        bank = [TYPE_QUESTIONS["behavioral"]]
    else:
        bank = _bank_for(job_description or "")
    unused = [q for q in bank if q not in previous]
    if unused:
        return rng.choice(unused)
    return TYPE_QUESTIONS.get(interview_type, TYPE_QUESTIONS["technical"])


def fallback_evaluation() -> EvalResult:
    return EvalResult(
        score=50,
        feedback="Unable to evaluate answer at this time.",
        strengths=["Attempted the question"],
        suggestions=["Try again with more detail"],
        source="fallback",
    )


def empty_answer_evaluation() -> EvalResult:
    return EvalResult(
        score=0,
        feedback="No answer was provided.",
        strengths=[],
        suggestions=["Attempt every question, even with a partial answer"],
        source="fallback",
    )


def fallback_summary(scores: Sequence[int]) -> SummaryResult:
    average = average_score(scores) if scores else 75
    return SummaryResult(
        overall_score=max(0, min(100, average)),
        summary="The candidate participated in the interview and provided responses to the questions asked.",
        strengths=["Engaged in the interview process", "Provided thoughtful responses"],
        improvements=["Could elaborate more on technical details", "Practice explaining complex concepts"],
        recommendation="Review performance and consider for next steps based on role requirements.",
        source="fallback",
    )


__all__ = [
    "GENERIC_QUESTIONS",
    "ROLE_QUESTIONS",
    "TYPE_QUESTIONS",
    "empty_answer_evaluation",
    "fallback_evaluation",
    "fallback_question",
    "fallback_summary",
]
