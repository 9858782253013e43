"""
Mock-interview question templates, platform tweaks, expected points, time limits, keywords and hints.

QUESTION_TEMPLATES[category][interview_type][difficulty] is a list of:
  - a plain question string,
  - a {"base": ...} template whose {placeholders} are filled from the listed values by question index,
  - a coding question {"question", "test_cases", "code_template"?, "hints"?}.
"""
from typing import Any

QUESTION_TEMPLATES: dict[str, dict[str, dict[str, list[Any]]]] = {
    "technical": {
        "standard": {
            "easy": [
                {
                    "base": "Explain the difference between {concept1} and {concept2}. Provide examples of when to use each.",
                    "concepts": [
                        {"concept1": "Array", "concept2": "Linked List"},
                        {"concept1": "Stack", "concept2": "Queue"},
                        {"concept1": "BFS", "concept2": "DFS"},
                        {"concept1": "HashMap", "concept2": "TreeMap"},
                    ],
                },
                {
                    "base": "What is {algorithm} and what is its time complexity? Explain with an example.",
                    "algorithms": ["Binary Search", "Merge Sort", "Quick Sort", "Bubble Sort"],
                },
            ],
            "medium": [
                {
                    "base": "Design a {dataStructure} that supports {operations} in O(1) time. Explain your approach.",
                    "data_structures": ["LRU Cache", "Min Stack", "Random Set"],
                    "operations": ["get, put", "push, pop, getMin", "insert, delete, getRandom"],
                },
                {
                    "base": "Implement {algorithm} and analyze its time and space complexity. Discuss optimizations.",
                    "algorithms": ["Two Pointers technique", "Sliding Window", "Dynamic Programming solution"],
                },
            ],
            "hard": [
                {
                    "base": "Design and implement {complexSystem}. Consider scalability and edge cases.",
                    "systems": ["Distributed Cache", "Rate Limiter", "Consistent Hashing", "Load Balancer"],
                },
            ],
        },
        "coding": {
            "easy": [
                {
                    "question": "Write a function to reverse a string without using built-in reverse methods.",
                    "test_cases": [
                        {"input": '"hello"', "expected_output": '"olleh"', "description": "Basic string reversal"},
                        {"input": '""', "expected_output": '""', "description": "Empty string"},
                        {"input": '"a"', "expected_output": '"a"', "description": "Single character"},
                    ],
                    "code_template": 'function reverseString(s) {\n    // Your implementation here\n    return "";\n}',
                    "hints": ["Try using two pointers approach", "Consider the time and space complexity"],
                },
                {
                    "question": "Implement a function to check if a string is a palindrome (case-insensitive).",
                    "test_cases": [
                        {"input": '"racecar"', "expected_output": "true", "description": "Simple palindrome"},
                        {"input": '"A man a plan a canal Panama"', "expected_output": "true", "description": "Palindrome with spaces"},
                        {"input": '"hello"', "expected_output": "false", "description": "Not a palindrome"},
                    ],
                },
            ],
            "medium": [
                {
                    "question": "Find the longest palindromic substring in a given string.",
                    "test_cases": [
                        {"input": '"babad"', "expected_output": '"bab" or "aba"', "description": "Multiple valid answers"},
                        {"input": '"cbbd"', "expected_output": '"bb"', "description": "Even length palindrome"},
                    ],
                    "hints": ["Consider expanding around centers", "Handle both odd and even length palindromes"],
                },
                {
                    "question": "Implement a function to find all anagrams of a string in a list of strings.",
                    "test_cases": [
                        {
                            "input": '["eat","tea","tan","ate","nat","bat"], "eat"',
                            "expected_output": '["tea","ate"]',
                            "description": "Find anagrams",
                        },
                    ],
                },
            ],
        },
    },
    "system-design": {
        "standard": {
            "easy": [
                "Design a URL shortener like bit.ly. Focus on core functionality and basic scalability.",
                "Design a simple chat application. Consider real-time messaging requirements.",
                "Design a basic file storage system like Dropbox. Focus on upload/download functionality.",
            ],
            "medium": [
                "Design a social media feed system like Twitter. Consider scalability and real-time updates.",
                "Design a ride-sharing service like Uber. Focus on matching drivers and riders.",
                "Design a notification system that can handle millions of users across different platforms.",
            ],
            "hard": [
                "Design a distributed cache system like Redis. Consider consistency, availability, and partition tolerance.",
                "Design a global content delivery network (CDN) with edge servers worldwide.",
                "Design a real-time collaborative document editing system like Google Docs.",
            ],
        },
    },
    "behavioral": {
        "standard": {
            "easy": [
                "Tell me about yourself and why you're interested in this role.",
                "Describe a project you're proud of and what you learned from it.",
                "Why do you want to work at our company?",
            ],
            "medium": [
                "Tell me about a time when you had to work with a difficult team member. How did you handle it?",
                "Describe a situation where you had to learn a new technology quickly. What was your approach?",
                "Give me an example of a time when you had to meet a tight deadline. How did you manage it?",
            ],
            "hard": [
                "Describe a time when you had to make a difficult technical decision with limited information.",
                "Tell me about a project that failed. What went wrong and what did you learn?",
                "How would you handle a situation where you disagree with your manager's technical decision?",
            ],
        },
    },
}

PLATFORM_MODIFICATIONS: dict[str, dict[str, Any]] = {
    "google": {
        "suffix": " (Focus on scalability, efficiency, and Google's scale)",
        "additional_points": ["Scalability to billions of users", "Performance optimization", "Data structure efficiency"],
    },
    "amazon": {
        "suffix": " (Consider Amazon's leadership principles and customer obsession)",
        "additional_points": ["Customer impact", "Ownership mindset", "Long-term thinking"],
    },
    "microsoft": {
        "suffix": " (Think about enterprise solutions and integration)",
        "additional_points": ["Enterprise scalability", "Integration capabilities", "Security considerations"],
    },
    "meta": {
        "suffix": " (Consider social scale and real-time requirements)",
        "additional_points": ["Social graph implications", "Real-time processing", "Privacy considerations"],
    },
    "apple": {
        "suffix": " (Focus on user experience and performance)",
        "additional_points": ["User experience", "Performance optimization", "Design simplicity"],
    },
    "netflix": {
        "suffix": " (Consider streaming scale and content delivery)",
        "additional_points": ["Content delivery", "Streaming optimization", "Global scale"],
    },
    "uber": {
        "suffix": " (Think about real-time systems and marketplace dynamics)",
        "additional_points": ["Real-time processing", "Marketplace efficiency", "Location-based services"],
    },
    "startup": {
        "suffix": " (Focus on MVP, rapid iteration, and resource constraints)",
        "additional_points": ["MVP approach", "Resource efficiency", "Rapid iteration"],
    },
}

# technical is split by interview type; every other category has one list
BASE_EXPECTED_POINTS: dict[str, Any] = {
    "technical": {
        "standard": ["Clear explanation of concepts", "Correct analysis", "Time/space complexity discussion"],
        "coding": ["Working solution", "Optimal approach", "Edge cases handling", "Code quality"],
    },
    "behavioral": ["STAR method (Situation, Task, Action, Result)", "Specific examples", "Lessons learned", "Impact demonstration"],
    "system-design": ["System architecture", "Scalability considerations", "Database design", "API design", "Trade-offs discussion"],
    "database": ["Schema design", "Query optimization", "Indexing strategy", "Normalization concepts"],
    "frontend": ["Component architecture", "State management", "Performance optimization", "User experience"],
    "backend": ["API design", "Database integration", "Error handling", "Security considerations"],
    "mobile": ["Platform-specific considerations", "Performance optimization", "User interface design", "Offline functionality"],
}

DIFFICULTY_EXPECTED_POINTS: dict[str, list[str]] = {
    "easy": [],
    "medium": ["Alternative approaches", "Performance considerations"],
    "hard": ["Advanced optimizations", "Edge cases handling", "Scalability considerations"],
}

# Seconds per question
TIME_LIMITS: dict[str, Any] = {
    "technical": {
        "standard": {"easy": 300, "medium": 450, "hard": 600},
        "coding": {"easy": 900, "medium": 1200, "hard": 1800},
    },
    "behavioral": {"easy": 180, "medium": 240, "hard": 300},
    "system-design": {"easy": 1200, "medium": 1800, "hard": 2400},
    "database": {"easy": 600, "medium": 900, "hard": 1200},
    "frontend": {"easy": 900, "medium": 1200, "hard": 1800},
    "backend": {"easy": 900, "medium": 1200, "hard": 1800},
    "mobile": {"easy": 900, "medium": 1200, "hard": 1800},
}
DEFAULT_TIME_LIMIT = 300

# Whole-word matches (multi-word entries never match a single word)
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "technical": ["algorithm", "complexity", "implementation", "data structure", "time", "space", "optimize", "efficient", "performance"],
    "behavioral": ["situation", "action", "result", "learned", "team", "challenge", "solution", "leadership", "collaboration"],
    "system-design": ["scalability", "database", "api", "architecture", "load", "cache", "distributed", "microservices", "consistency"],
    "coding": ["function", "loop", "condition", "variable", "return", "array", "object", "method", "optimization"],
}

HINT_TEMPLATES: dict[str, list[str]] = {
    "technical": [
        "Think about the fundamental data structures that could solve this problem efficiently.",
        "Consider the time and space complexity trade-offs of different approaches.",
        "Break down the problem into smaller subproblems.",
        "Think about edge cases and how your solution handles them.",
    ],
    "coding": [
        "Start with a brute force approach, then optimize.",
        "Consider using two pointers or sliding window technique.",
        "Think about what data structure would give you the fastest lookup.",
        "Draw out a few examples to understand the pattern.",
    ],
    "system-design": [
        "Start with the basic components and their interactions.",
        "Consider how the system would scale with millions of users.",
        "Think about data consistency and availability trade-offs.",
        "Consider caching strategies and database partitioning.",
    ],
    "behavioral": [
        "Use the STAR method: Situation, Task, Action, Result.",
        "Be specific about your role and contributions.",
        "Focus on the impact and what you learned.",
        "Quantify your results where possible.",
    ],
}
