from typing import List, Optional

from app.models.parsed_report import ErrorGroup, ParsedReport

TOP_ERRORS = 10
MAX_STACK_TRACE_CHARS = 500


class PromptBuilder:
    """Builds the markdown context document handed to an AI assistant.

    The document starts with a summary table of the parsed report and then
    lists the most frequent error groups with their samples and stack
    traces.  Only the top 10 groups are included to keep the context small;
    stack traces are truncated to 500 characters for the same reason.

    A report without error groups is a healthy result, not a failure, and is
    rendered as such.
    """

    @staticmethod
    def build_context(report: ParsedReport, service_name: Optional[str] = None) -> str:
        """
        Render a parsed report as a markdown document.

        Args:
            report: The result of ``LogParser.parse``.
            service_name: Optional name of the service the logs came from,
                used in the document title.

        Returns:
            The markdown document as a single string.
        """
        title = f"# Log analysis: {service_name}" if service_name else "# Log analysis"
        sections: List[str] = [title, PromptBuilder._summary_table(report)]

        if not report.errors:
            sections.append(
                "## Errors\n\n"
                "No errors detected in the provided logs. The service looks healthy."
            )
            return "\n\n".join(sections) + "\n"

        sections.append("## Errors")
        for idx, group in enumerate(report.errors[:TOP_ERRORS], start=1):
            sections.append(PromptBuilder._error_section(idx, group))

        hidden = len(report.errors) - TOP_ERRORS
        if hidden > 0:
            sections.append(f"_{hidden} less frequent error group(s) omitted._")

        return "\n\n".join(sections) + "\n"

    @staticmethod
    def _summary_table(report: ParsedReport) -> str:
        if report.time_range:
            time_range = f"{report.time_range.start} → {report.time_range.end}"
        else:
            time_range = "n/a"
        occurrences = sum(group.count for group in report.errors)
        rows = [
            ("Total lines", report.total_lines),
            ("Detected format", report.detected_format),
            ("Time range", time_range),
            ("Error occurrences", occurrences),
            ("Distinct errors", len(report.errors)),
            ("Warnings", report.warnings),
            ("Info", report.info),
            ("Debug", report.debug),
        ]
        table = ["## Summary", "", "| Metric | Value |", "|---|---|"]
        table.extend(f"| {name} | {value} |" for name, value in rows)
        return "\n".join(table)

    @staticmethod
    def _error_section(idx: int, group: ErrorGroup) -> str:
        lines = [
            f"### {idx}. {group.message}",
            "",
            f"- Level: {group.level}",
            f"- Occurrences: {group.count}",
        ]
        if group.timestamp:
            lines.append(f"- Last seen: {group.timestamp}")

        lines.extend(["", "Samples:", "```"])
        lines.extend(group.samples)
        lines.append("```")

        if group.stack_trace:
            # Truncate the joined trace rather than dropping whole frames
            trace = "\n".join(group.stack_trace)
            if len(trace) > MAX_STACK_TRACE_CHARS:
                trace = trace[:MAX_STACK_TRACE_CHARS] + "..."
            lines.extend(["", "Stack trace:", "```", trace, "```"])

        return "\n".join(lines)
