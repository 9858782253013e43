"""
Quiz question bank, keyed by category id.
correct_answer is an index into options. Points: easy 10, medium 20, hard 30.
"""
from typing import TypedDict


class QuizCategory(TypedDict):
    id: str
    name: str
    color: str
    description: str


class QuizQuestion(TypedDict):
    id: str
    question: str
    options: list[str]
    correct_answer: int
    explanation: str
    difficulty: str  # easy | medium | hard
    category: str
    points: int


QUIZ_CATEGORIES: list[QuizCategory] = [
    {
        "id": "dsa",
        "name": "Data Structures & Algorithms",
        "color": "bg-blue-500",
        "description": "Arrays, Trees, Graphs, Sorting, Searching",
    },
    {
        "id": "aptitude",
        "name": "Quantitative Aptitude",
        "color": "bg-green-500",
        "description": "Math, Logic, Reasoning, Probability",
    },
    {
        "id": "programming",
        "name": "Programming Concepts",
        "color": "bg-purple-500",
        "description": "OOP, Design Patterns, Best Practices",
    },
    {
        "id": "system-design",
        "name": "System Design",
        "color": "bg-orange-500",
        "description": "Scalability, Architecture, Databases",
    },
    {
        "id": "cs-fundamentals",
        "name": "CS Fundamentals",
        "color": "bg-indigo-500",
        "description": "OS, Networks, DBMS, Compilers",
    },
]

# system-design and cs-fundamentals have no entries yet; runs there get a generated sample question.
QUESTION_BANK: dict[str, list[QuizQuestion]] = {
    "dsa": [
        {
            "id": "dsa_1",
            "question": "What is the time complexity of binary search in a sorted array?",
            "options": ["O(n)", "O(log n)", "O(n log n)", "O(1)"],
            "correct_answer": 1,
            "explanation": "Binary search divides the search space in half with each comparison, resulting in O(log n) time complexity.",
            "difficulty": "easy",
            "category": "dsa",
            "points": 10,
        },
        {
            "id": "dsa_2",
            "question": "Which data structure is best for implementing a LRU cache?",
            "options": ["Array", "Stack", "HashMap + Doubly Linked List", "Binary Tree"],
            "correct_answer": 2,
            "explanation": "LRU cache requires O(1) access and update operations, which is achieved using HashMap for fast lookup and Doubly Linked List for maintaining order.",
            "difficulty": "medium",
            "category": "dsa",
            "points": 20,
        },
        {
            "id": "dsa_3",
            "question": "What is the worst-case time complexity of QuickSort?",
            "options": ["O(n log n)", "O(n²)", "O(n)", "O(log n)"],
            "correct_answer": 1,
            "explanation": "QuickSort has O(n²) worst-case complexity when the pivot is always the smallest or largest element, but O(n log n) average case.",
            "difficulty": "medium",
            "category": "dsa",
            "points": 20,
        },
    ],
    "aptitude": [
        {
            "id": "apt_1",
            "question": "If 5 machines can produce 5 widgets in 5 minutes, how many widgets can 100 machines produce in 100 minutes?",
            "options": ["100", "500", "1000", "2000"],
            "correct_answer": 3,
            "explanation": "Each machine produces 1 widget in 5 minutes, so 1 widget per minute per machine. 100 machines × 100 minutes = 2000 widgets.",
            "difficulty": "medium",
            "category": "aptitude",
            "points": 20,
        },
        {
            "id": "apt_2",
            "question": "What is 15% of 80?",
            "options": ["10", "12", "15", "20"],
            "correct_answer": 1,
            "explanation": "15% of 80 = (15/100) × 80 = 0.15 × 80 = 12",
            "difficulty": "easy",
            "category": "aptitude",
            "points": 10,
        },
    ],
    "programming": [
        {
            "id": "prog_1",
            "question": "Which principle states that software entities should be open for extension but closed for modification?",
            "options": ["Single Responsibility", "Open/Closed", "Liskov Substitution", "Dependency Inversion"],
            "correct_answer": 1,
            "explanation": "The Open/Closed Principle states that classes should be open for extension but closed for modification.",
            "difficulty": "medium",
            "category": "programming",
            "points": 20,
        },
    ],
}
