"""Report strings in English and Arabic."""

from __future__ import annotations

from .models import Answer, Language

_STRINGS: dict[Language, dict[str, str]] = {
    Language.EN: {
        "title": "Poll Results",
        "subtitle": "Total votes: {total}   Shown in this report: {filtered}",
        "breakdown": "Vote Breakdown",
        "breakdown_line": "{answer}: {count} votes ({pct}%)",
        "no_votes": "No votes recorded.",
        "filters": "Applied Filters",
        "filter_answer": "Answer: {answer}",
        "filter_search": "Search: {term}",
        "table": "Voter Details",
        "col_name": "Name",
        "col_phone": "Phone",
        "col_answer": "Answer",
        "col_date": "Date",
        "no_rows": "No votes match the current filters.",
        "generated": "Generated on {date}",
        "page": "Page {page} of {pages}",
        "filename": "poll-results",
    },
    Language.AR: {
        "title": "نتائج التصويت",
        "subtitle": "إجمالي الأصوات: {total}   المعروض في التقرير: {filtered}",
        "breakdown": "توزيع الأصوات",
        "breakdown_line": "{answer}: {count} صوت ({pct}%)",
        "no_votes": "لا توجد أصوات مسجلة.",
        "filters": "الفلاتر المطبقة",
        "filter_answer": "الإجابة: {answer}",
        "filter_search": "البحث: {term}",
        "table": "تفاصيل المصوتين",
        "col_name": "الاسم",
        "col_phone": "الهاتف",
        "col_answer": "الإجابة",
        "col_date": "التاريخ",
        "no_rows": "لا توجد أصوات مطابقة للفلاتر الحالية.",
        "generated": "تم الإنشاء في {date}",
        "page": "صفحة {page} من {pages}",
        "filename": "نتائج-التصويت",
    },
}

_ANSWERS: dict[Language, dict[str, str]] = {
    Language.EN: {Answer.YES.value: "Yes", Answer.NO.value: "No"},
    Language.AR: {Answer.YES.value: "نعم", Answer.NO.value: "لا"},
}


class Labels:
    """String lookup bound to one language."""

    def __init__(self, language: Language) -> None:
        self.language = language
        self._strings = _STRINGS[language]

    def __call__(self, key: str, **values: object) -> str:
        return self._strings[key].format(**values)

    def answer(self, value: str) -> str:
        """Display label for an answer; unknown answers are shown as stored."""
        return _ANSWERS[self.language].get(value, value)
