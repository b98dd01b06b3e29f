"""Static story graph validation utilities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from codex.domain.defs import RESTART_TARGET, SectionDef, StoryDef
from codex.services.option import KNOWN_FLAGS

Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class SectionInfo:
    section_id: str
    targets: list[tuple[str, str]]
    has_options: bool


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def has_errors(issues: Sequence[Issue]) -> bool:
    return any(issue.severity == "ERROR" for issue in issues)


def validate_story_graph(
    story: StoryDef | Mapping[str, SectionDef],
    entry_roots: Sequence[str] = ("start",),
) -> list[Issue]:
    """Check option targets, entry roots, reachability and flags.

    Targets chosen at run time through ``goto_section`` cannot be seen here,
    so sections only reached that way are reported as unreachable warnings.
    """
    sections = story.sections if isinstance(story, StoryDef) else story
    issues: list[Issue] = []
    infos = {section_id: _build_section_info(section, issues) for section_id, section in sections.items()}
    section_ids = set(infos.keys())

    for root in entry_roots:
        if root not in section_ids:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_ENTRY_ROOT",
                    message="Entry root references missing section.",
                    context={"referenced_id": root},
                )
            )

    for info in infos.values():
        _validate_targets(info, section_ids, issues)
        if not info.has_options:
            issues.append(
                Issue(
                    severity="WARN",
                    code="DEAD_END",
                    message="Section has no options.",
                    context={"section_id": info.section_id},
                )
            )

    _validate_reachability(infos, entry_roots, issues)
    return issues


def _build_section_info(section: SectionDef, issues: list[Issue]) -> SectionInfo:
    targets: list[tuple[str, str]] = []
    for option_id, option in section.options.items():
        targets.append((option_id, option.target))
        for flag in sorted(option.flags - KNOWN_FLAGS):
            issues.append(
                Issue(
                    severity="WARN",
                    code="UNKNOWN_FLAG",
                    message="Option flag is not recognized by runtime and will be ignored.",
                    context={"section_id": section.id, "option_id": option_id, "flag": flag},
                )
            )
    return SectionInfo(section_id=section.id, targets=targets, has_options=bool(section.options))


def _validate_targets(info: SectionInfo, section_ids: set[str], issues: list[Issue]) -> None:
    for option_id, target in info.targets:
        if target == RESTART_TARGET or target in section_ids:
            continue
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_TARGET",
                message="Option references missing section.",
                context={
                    "section_id": info.section_id,
                    "option_id": option_id,
                    "referenced_id": target,
                },
            )
        )


def _validate_reachability(
    infos: Mapping[str, SectionInfo],
    entry_roots: Sequence[str],
    issues: list[Issue],
) -> None:
    section_ids = set(infos.keys())
    reachable: set[str] = set()
    stack = [root for root in entry_roots if root in section_ids]
    while stack:
        section_id = stack.pop()
        if section_id in reachable:
            continue
        reachable.add(section_id)
        for _, target in infos[section_id].targets:
            if target in section_ids:
                stack.append(target)
    for section_id in sorted(section_ids - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_SECTION",
                message="Section is unreachable from story roots.",
                context={"section_id": section_id},
            )
        )
