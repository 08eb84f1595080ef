"""Templates for prompts about organizations."""

from __future__ import annotations

from mockstream.catalog import register


@register("company")
def company_overview(subject: str) -> str:
    return (
        f"# {subject}: company overview\n\n"
        f"**{subject}** builds practical software for teams that would rather ship "
        f"than debate tooling. The organization is small, remote-friendly and "
        f"deliberately boring about process.\n\n"
        f"## At a glance\n\n"
        f"| Metric | Value |\n"
        f"| --- | --- |\n"
        f"| Founded | 2016 |\n"
        f"| Headquarters | Lorem City |\n"
        f"| Employees | ~120 |\n"
        f"| Funding stage | Series B |\n\n"
        f"## Products\n\n"
        f"- **Ipsum Cloud**: hosted workflow automation\n"
        f"- **Dolor CLI**: a command-line companion for power users\n"
        f"- **Sit Amet Insights**: reporting for operations teams\n"
    )


@register("company")
def swot_analysis(subject: str) -> str:
    return (
        f"## SWOT analysis: {subject}\n\n"
        f"### Strengths\n"
        f"- Loyal customer base with low churn\n"
        f"- Engineering culture that values documentation\n\n"
        f"### Weaknesses\n"
        f"- Limited brand recognition outside its niche\n"
        f"- Sales cycle depends on a handful of large accounts\n\n"
        f"### Opportunities\n"
        f"- Expansion into adjacent mid-market segments\n"
        f"- Partnerships with platform vendors\n\n"
        f"### Threats\n"
        f"- Larger competitors bundling similar features for free\n"
        f"- Talent competition in its home market\n\n"
        f"> Bottom line: {subject} is well positioned if it keeps its focus.\n"
    )


@register("company")
def team_snapshot(subject: str) -> str:
    return (
        f"### Inside {subject}\n\n"
        f"The team at **{subject}** is organized around small, durable groups "
        f"that own a product area end to end.\n\n"
        f"1. **Platform**: infrastructure, reliability and developer tooling\n"
        f"2. **Product**: design, research and feature delivery\n"
        f"3. **Go-to-market**: sales, support and partnerships\n\n"
        f"#### How they work\n\n"
        f"- Written proposals before meetings\n"
        f"- Quarterly planning with monthly check-ins\n"
        f"- A standing rule that every incident gets a blameless review\n\n"
        f"*Figures and structure shown here are illustrative.*\n"
    )
