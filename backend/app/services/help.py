"""Static help centre content."""
from typing import Optional

FAQS: list[dict[str, str]] = [
    {
        "question": "How do I create an account?",
        "answer": (
            "Sign up and choose your role (Student or Employer). Students provide their name, "
            "email and phone number. Employers also provide their company name."
        ),
    },
    {
        "question": "Can I change my account type?",
        "answer": (
            "Account types (Student/Employer) cannot be changed after registration. "
            "Contact support if you need a different account type."
        ),
    },
    {
        "question": "How do I update my profile?",
        "answer": "Open Settings to update your display name and phone number.",
    },
    {
        "question": "How do I post a job?",
        "answer": (
            "Sign in as an employer and choose 'Post Job'. Fill in the title, description, "
            "requirements and salary. Postings are reviewed by an administrator before they are published."
        ),
    },
    {
        "question": "How do I manage my job postings?",
        "answer": (
            "Open 'My Postings' to view, edit or delete your postings and see the applications "
            "received for each one. Postings can be edited until an administrator reviews them."
        ),
    },
    {
        "question": "How do I apply for a job?",
        "answer": (
            "Browse the job listings, open a job and choose 'Apply'. Provide a link to your resume "
            "and optionally a cover letter. You can apply to each job once."
        ),
    },
    {
        "question": "How can I track my applications?",
        "answer": (
            "Open 'My Applications' to see every application you submitted and its current status "
            "(Pending, Accepted, or Rejected)."
        ),
    },
    {
        "question": "Is my personal information secure?",
        "answer": (
            "Passwords are stored as salted hashes and your details are only shown to the "
            "employers you apply to."
        ),
    },
]


def search_faqs(query: Optional[str] = None) -> list[dict[str, str]]:
    """Case-insensitive match on question or answer. No query returns everything."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(FAQS)
    return [
        faq for faq in FAQS
        if needle in faq["question"].lower() or needle in faq["answer"].lower()
    ]
