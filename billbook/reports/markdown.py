"""Markdown rendering of a ReportDocument."""

from billbook.reports.generator import MonthSection, ReportDocument, ReportSummary


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _render_section(section: MonthSection, labels: dict[str, str]) -> list[str]:
    lines: list[str] = []
    lines.append(f"## {section.heading}")
    lines.append("")
    lines.append(f"{labels['paymentDate']} {section.payment_date}")
    lines.append("")
    lines.append(f"| {labels['billName']} | {labels['amount']} | {labels['category']} | {labels['notes']} |")
    lines.append("| --- | ---: | --- | --- |")
    if not section.rows:
        lines.append(f"| _{labels['noBills']}_ | | | |")
    for row in section.rows:
        lines.append(f"| {_cell(row.name)} | {row.amount} | {_cell(row.category)} | {_cell(row.comment)} |")
    lines.append("")
    lines.append(f"**{labels['monthTotal']}** {section.total_text}")
    lines.append("")
    if section.notes:
        lines.append(f"_{labels['notesLabel']}_")
        lines.append("")
        lines.append(section.notes)
        lines.append("")
    return lines


def _render_summary(summary: ReportSummary, labels: dict[str, str]) -> list[str]:
    lines: list[str] = []
    lines.append(f"## {labels['summary']}")
    lines.append("")
    lines.append(f"| {labels['month']} | {labels['paymentDateHeader']} | {labels['billsCount']} | {labels['total']} |")
    lines.append("| --- | --- | :---: | ---: |")
    for row in summary.rows:
        lines.append(f"| {row.month} | {row.payment_date} | {row.bill_count} | {row.total_text} |")
    lines.append(
        f"| **{labels['totalLabel']}** | {summary.months_count_text} | {summary.bill_count} | **{summary.total_text}** |"
    )
    lines.append(f"| **{labels['averageLabel']}** | | | **{summary.average_text}** |")
    lines.append("")
    return lines


def render_report_markdown(doc: ReportDocument) -> str:
    lines: list[str] = []
    lines.append(f"# {doc.title}")
    lines.append("")
    lines.append(doc.generated_line)
    lines.append("")

    for idx, page in enumerate(doc.pages):
        if idx:
            lines.append("---")
            lines.append("")
        for section in page.sections:
            lines.extend(_render_section(section, doc.labels))
        if page.summary is not None:
            lines.extend(_render_summary(page.summary, doc.labels))
        lines.append(f"<sub>{page.footer}</sub>")
        lines.append("")

    return "\n".join(lines)
