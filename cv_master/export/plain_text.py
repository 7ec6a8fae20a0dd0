"""Plain-text rendering of an optimized resume."""

from cv_master.gateway.schemas import OptimizedDocument

EXPORT_FILENAME = "optimized_resume.txt"

_SKILL_LABELS = (
    ("technical", "Technical"),
    ("tools", "Tools"),
    ("languages", "Languages"),
    ("soft", "Soft skills"),
)


def render_plain_text(document: OptimizedDocument) -> str:
    """Render the resume as plain text, one section per block."""
    d = document.structured_content
    lines = [d.full_name, d.title, ""]

    contact = [
        f"Email: {d.contact.email}" if d.contact.email else "",
        f"Phone: {d.contact.phone}" if d.contact.phone else "",
        f"Location: {d.contact.location}" if d.contact.location else "",
        f"LinkedIn: {d.contact.linkedin}" if d.contact.linkedin else "",
        f"Portfolio: {d.contact.portfolio}" if d.contact.portfolio else "",
    ]
    lines.append(" | ".join(c for c in contact if c))
    lines.append("")

    lines += ["PROFESSIONAL SUMMARY", d.professional_summary, ""]

    lines.append("EXPERIENCE")
    for exp in d.experience:
        header = f"{exp.position} - {exp.company}"
        if exp.start_date or exp.end_date:
            header += f" ({exp.start_date} - {exp.end_date})"
        if exp.location:
            header += f", {exp.location}"
        lines.append(header)
        lines += [f"- {a}" for a in exp.achievements]
        lines.append("")

    if d.projects:
        lines.append("PROJECTS")
        for proj in d.projects:
            header = proj.name
            if proj.technologies:
                header += f" | {proj.technologies}"
            lines.append(header)
            if proj.description:
                lines.append(proj.description)
            lines.append("")

    if d.education:
        lines.append("EDUCATION")
        for edu in d.education:
            parts = [edu.degree, edu.institution, edu.location, edu.year]
            lines.append(", ".join(p for p in parts if p))
        lines.append("")

    skill_lines = []
    for attr, label in _SKILL_LABELS:
        values = getattr(d.skills, attr)
        if values:
            skill_lines.append(f"{label}: {', '.join(values)}")
    if skill_lines:
        lines.append("SKILLS")
        lines += skill_lines
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
