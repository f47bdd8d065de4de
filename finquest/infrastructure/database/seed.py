"""Sample financial literacy catalog: five lessons with three quiz questions each"""

from typing import Any, Dict, List
from sqlalchemy.orm import Session
from finquest.infrastructure.database.models import Lesson, QuizQuestion
from finquest.infrastructure.database.repositories import LessonRepository

SAMPLE_LESSONS: List[Dict[str, Any]] = [
    {
        "lesson_id": "money-basics",
        "title": "Understanding Money Basics",
        "description": "Learn what money is and how it works in daily life",
        "category": "basics",
        "difficulty": "beginner",
        "content": (
            "Money is a medium of exchange that helps us buy goods and services. It has three main "
            "functions: medium of exchange, store of value, and unit of account."
        ),
        "coin_reward": 50,
        "estimated_minutes": 10,
    },
    {
        "lesson_id": "power-of-saving",
        "title": "The Power of Saving",
        "description": "Discover why saving money is important and how to start",
        "category": "savings",
        "difficulty": "beginner",
        "content": (
            "Saving money means setting aside a portion of your income for future use. It helps you "
            "prepare for emergencies and achieve your goals."
        ),
        "coin_reward": 75,
        "estimated_minutes": 15,
    },
    {
        "lesson_id": "understanding-interest",
        "title": "Understanding Interest",
        "description": "Learn how interest works in savings and loans",
        "category": "interest",
        "difficulty": "intermediate",
        "content": (
            "Interest is the cost of borrowing money or the reward for saving money. Simple interest is "
            "calculated on the principal amount, while compound interest is calculated on principal plus "
            "accumulated interest."
        ),
        "coin_reward": 100,
        "estimated_minutes": 20,
    },
    {
        "lesson_id": "loans-and-emi",
        "title": "Loans and EMI Explained",
        "description": "Understand how loans work and what EMI means",
        "category": "loans",
        "difficulty": "intermediate",
        "content": (
            "A loan is money borrowed that must be repaid with interest. EMI (Equated Monthly Installment) "
            "is a fixed payment amount made by a borrower to a lender at a specified date each month."
        ),
        "coin_reward": 125,
        "estimated_minutes": 25,
    },
    {
        "lesson_id": "credit-cards",
        "title": "Credit Cards: Benefits and Risks",
        "description": "Learn how to use credit cards responsibly",
        "category": "credit",
        "difficulty": "intermediate",
        "content": (
            "Credit cards allow you to borrow money up to a certain limit. They offer convenience and "
            "rewards but can lead to debt if not used responsibly."
        ),
        "coin_reward": 100,
        "estimated_minutes": 20,
    },
]

# Keyed by lesson_id: (question, options, correct_answer, explanation)
SAMPLE_QUESTIONS: Dict[str, List[tuple]] = {
    "money-basics": [
        (
            "What are the three main functions of money?",
            [
                "Counting, dividing, and storing",
                "Medium of exchange, store of value, and unit of account",
                "Buying, selling, and trading",
                "Lending, borrowing, and investing",
            ],
            1,
            "Money serves three key functions: as a medium of exchange, a store of value, and a unit of account.",
        ),
        (
            "Which of these is NOT a form of money?",
            ["Coins", "Paper currency", "Diamonds", "Bank deposits"],
            2,
            "While diamonds have value, they are not widely accepted as a standard form of money.",
        ),
        (
            "What does 'store of value' mean for money?",
            [
                "Money can be kept and used later without losing purchasing power",
                "Money can be used immediately",
                "Money must be used within a day",
                "Money increases in value over time",
            ],
            0,
            "Store of value means you can hold money and use it later with relatively stable purchasing power.",
        ),
    ],
    "power-of-saving": [
        (
            "Why is saving money important?",
            [
                "To spend more money",
                "To prepare for emergencies and achieve future goals",
                "To avoid paying taxes",
                "To make friends",
            ],
            1,
            "Saving helps you handle unexpected expenses and work towards long-term financial goals.",
        ),
        (
            "What is a good approach to saving?",
            [
                "Save only when you have extra money",
                "Set aside a fixed portion of your income regularly",
                "Never spend money",
                "Save only for luxuries",
            ],
            1,
            "Regular saving, even small amounts, builds a strong financial foundation.",
        ),
        (
            "How long should an emergency fund typically cover?",
            ["1 week", "1 month", "3-6 months of expenses", "1 year"],
            2,
            "Most financial experts recommend saving 3-6 months of expenses for emergencies.",
        ),
    ],
    "understanding-interest": [
        (
            "What is simple interest?",
            [
                "Interest calculated only on the principal amount",
                "Interest calculated on principal plus accumulated interest",
                "Interest that changes daily",
                "Interest paid to the government",
            ],
            0,
            "Simple interest is calculated only on the original principal amount.",
        ),
        (
            "Which type of interest grows faster?",
            ["Simple interest", "Compound interest", "They grow at the same rate", "Fixed interest"],
            1,
            "Compound interest grows faster because interest is earned on principal and accumulated interest.",
        ),
        (
            "If you deposit 1000 at 5% annual simple interest for 2 years, how much interest do you earn?",
            ["50", "100", "105", "110"],
            1,
            "Simple interest = Principal x Rate x Time = 1000 x 0.05 x 2 = 100",
        ),
    ],
    "loans-and-emi": [
        (
            "What does EMI stand for?",
            [
                "Equal Monthly Income",
                "Equated Monthly Installment",
                "Electronic Money Transfer",
                "Every Month Interest",
            ],
            1,
            "EMI stands for Equated Monthly Installment, a fixed payment made monthly to repay a loan.",
        ),
        (
            "Which factor does NOT affect EMI calculation?",
            ["Loan amount", "Interest rate", "Tenure", "Your hobbies"],
            3,
            "Only loan amount, interest rate, and tenure matter for EMI.",
        ),
        (
            "What happens if you pay off a loan early?",
            [
                "You pay the same amount",
                "You pay more interest",
                "You typically pay less total interest",
                "The bank cancels the loan",
            ],
            2,
            "Paying off a loan early reduces total interest because interest accrues over a shorter period.",
        ),
    ],
    "credit-cards": [
        (
            "What is a credit limit?",
            [
                "The amount you can borrow using the credit card",
                "The amount you must spend each month",
                "The fee for using the card",
                "The interest rate charged",
            ],
            0,
            "A credit limit is the maximum amount of credit the card issuer allows you to borrow.",
        ),
        (
            "What happens if you don't pay your credit card bill on time?",
            [
                "Nothing, it's automatically forgiven",
                "You face late fees and interest charges",
                "Your card is upgraded",
                "You earn bonus rewards",
            ],
            1,
            "Late payments result in additional charges and higher interest rates.",
        ),
        (
            "What is a credit score primarily based on?",
            ["Your salary", "Your age", "Your payment history and credit usage", "Your hobbies"],
            2,
            "Credit scores are primarily determined by payment history, credit utilization, and borrowing patterns.",
        ),
    ],
}


def build_sample_catalog() -> List[Lesson]:
    """ORM objects for the sample lessons with their questions attached"""
    lessons = []
    for entry in SAMPLE_LESSONS:
        lesson = Lesson(is_active=True, **entry)
        lesson.questions = [
            QuizQuestion(
                position=position,
                question=question,
                options=options,
                correct_answer=correct_answer,
                explanation=explanation,
                points=10,
            )
            for position, (question, options, correct_answer, explanation) in enumerate(
                SAMPLE_QUESTIONS.get(entry["lesson_id"], [])
            )
        ]
        lessons.append(lesson)
    return lessons


def seed_lessons(db: Session) -> int:
    """Replace the lesson catalog with the sample lessons; returns how many were inserted"""
    lessons = build_sample_catalog()
    LessonRepository(db).replace_catalog(lessons)
    return len(lessons)
