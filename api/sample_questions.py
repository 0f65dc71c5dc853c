"""
api/sample_questions.py — 교원 자격 이론 시험 샘플 문제 (10문항)
"""

from licensing_exam.models.question_model import Option, Question, QuestionSet


def _options(*texts: str) -> list[Option]:
    return [Option(id=oid, text=text) for oid, text in zip("abcd", texts)]


SAMPLE_QUESTIONS = QuestionSet(questions=[
    Question(
        id=1, category="Regulations",
        prompt="According to UAE education regulations, what is the minimum student-teacher "
               "ratio required for primary schools?",
        options=_options("1:15", "1:20", "1:25", "1:30"),
        correct_option_id="c",
    ),
    Question(
        id=2, category="Standards",
        prompt="Which of the following is NOT a core competency in the UAE Teacher Professional Standards?",
        options=_options(
            "Planning and implementing effective teaching",
            "Creating safe learning environments",
            "Student marketing and enrollment",
            "Professional development and ethics",
        ),
        correct_option_id="c",
    ),
    Question(
        id=3, category="Child Safety",
        prompt="A teacher notices signs of potential child abuse. According to UAE child protection "
               "laws, what is the correct first step?",
        options=_options(
            "Confront the suspected abuser directly",
            "Report to school administration and child protection officer",
            "Discuss with other teachers first",
            "Wait to gather more evidence",
        ),
        correct_option_id="b",
    ),
    Question(
        id=4, category="Pedagogy",
        prompt="When implementing differentiated instruction, which approach is most appropriate "
               "for students with diverse learning needs?",
        options=_options(
            "Teaching all students at the same pace",
            "Grouping students strictly by ability",
            "Providing varied learning activities based on readiness",
            "Only focusing on advanced learners",
        ),
        correct_option_id="c",
    ),
    Question(
        id=5, category="Professional Development",
        prompt="What is the recommended frequency for Continuing Professional Development (CPD) "
               "activities for licensed educators in the UAE?",
        options=_options(
            "Once per academic year",
            "Minimum 40 hours over two years",
            "Only when renewing license",
            "No specific requirement",
        ),
        correct_option_id="b",
    ),
    Question(
        id=6, category="Assessment",
        prompt="Which assessment method is most appropriate for evaluating 21st-century skills "
               "like collaboration and critical thinking?",
        options=_options(
            "Multiple choice tests only",
            "Project-based assessments with rubrics",
            "Memorization-based exams",
            "Attendance records",
        ),
        correct_option_id="b",
    ),
    Question(
        id=7, category="Curriculum",
        prompt="According to UAE education policy, what language must be used for teaching "
               "national identity subjects?",
        options=_options(
            "English only",
            "Arabic",
            "Any language preferred by the school",
            "Bilingual (Arabic and English)",
        ),
        correct_option_id="b",
    ),
    Question(
        id=8, category="Inclusive Education",
        prompt="A student with special educational needs (SEN) requires accommodations during "
               "exams. What is the teacher's primary responsibility?",
        options=_options(
            "Treat them exactly like other students",
            "Implement the documented Individual Education Plan (IEP)",
            "Exempt them from all assessments",
            "Assign a separate teacher",
        ),
        correct_option_id="b",
    ),
    Question(
        id=9, category="Assessment",
        prompt="What is the primary purpose of formative assessment in the classroom?",
        options=_options(
            "To grade students at the end of term",
            "To provide ongoing feedback and guide instruction",
            "To rank students against each other",
            "To satisfy regulatory requirements",
        ),
        correct_option_id="b",
    ),
    Question(
        id=10, category="Technology",
        prompt="When using technology in the classroom, which consideration is most important "
               "according to digital citizenship guidelines?",
        options=_options(
            "Using the most expensive devices",
            "Student safety, privacy, and responsible use",
            "Replacing all traditional teaching methods",
            "Allowing unrestricted internet access",
        ),
        correct_option_id="b",
    ),
])
