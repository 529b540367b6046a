"""
Terminal rendering for generated configurations.

Everything here prints to stdout; logs go to stderr so the report stays clean.
"""

from typing import List, Optional, Sequence

from relevance.costs import CostSummary
from relevance.models import ConfigResult

RULE = "─"
HEAVY_RULE = "━"
COLUMN = "│"
CROSS = "┼"


def _data(result: Optional[ConfigResult]) -> List[str]:
    return list(result.data) if result is not None else []


def _numbered(items: Sequence[str], index: int, blank_when_missing: bool = False) -> str:
    item = items[index] if index < len(items) else ""
    if blank_when_missing and not item:
        return ""
    return f"{index + 1}. {item}"


def _width(header: str, cells: Sequence[str], minimum: int) -> int:
    longest = max([len(header), *(len(cell) for cell in cells)])
    return max(longest + 2, minimum)


def _print_reasoning(label: str, reasoning: str, indent: str = "  ") -> None:
    print(label)
    for line in reasoning.split("\n"):
        print(f"{indent}{line}")


def _print_model_reasoning(
    results: Sequence[Optional[ConfigResult]],
    models: Sequence[str],
    heading: str,
) -> None:
    if not any(result is not None and result.reasoning for result in results):
        print("\n💡 No reasoning available for these models")
        return

    print(f"\n{heading}")
    for result, model in zip(results, models):
        if result is not None and result.reasoning:
            _print_reasoning(f"\n{model}:", result.reasoning)


def _print_differences(differences: List[str], heading: str, match_message: str) -> None:
    print("")
    if differences:
        print(heading)
        for i, diff in enumerate(differences, 1):
            print(f"  {i}. {diff}")
    else:
        print(match_message)


# =============================================================================
# Differences
# =============================================================================

def find_differences(current: Sequence[str], suggested: Sequence[str]) -> List[str]:
    """
    Describe how `suggested` differs from `current`.

    >>> find_differences(["a", "b"], ["b", "c"])
    ['Removed: a', 'Added: c']
    >>> find_differences(["a", "b"], ["b", "a"])
    ['Order changed']
    """
    differences = []

    removed = [item for item in current if item not in suggested]
    if removed:
        differences.append(f"Removed: {', '.join(removed)}")

    added = [item for item in suggested if item not in current]
    if added:
        differences.append(f"Added: {', '.join(added)}")

    same_items = (
        len(current) == len(suggested)
        and not removed
        and not added
    )
    if same_items and list(current) != list(suggested):
        differences.append("Order changed")

    return differences


# =============================================================================
# Single Result
# =============================================================================

def display_section(title: str, result: ConfigResult, verbose: bool = False) -> None:
    """Print one generated setting as a numbered list, or an ATTRIBUTE│REASON table."""
    print(title)
    print(RULE * 50)

    data = _data(result)

    if data and result.attribute_reasons:
        numbered = [_numbered(data, i) for i in range(len(data))]
        reasons = [result.reason_for(attr) or "No reason provided" for attr in data]

        attr_width = _width("ATTRIBUTE", numbered, 30)
        reason_width = _width("REASON", reasons, 40)

        print("")
        print(f"{'ATTRIBUTE'.ljust(attr_width)}{COLUMN} REASON")
        print(RULE * attr_width + CROSS + RULE * reason_width)
        for cell, reason in zip(numbered, reasons):
            print(f"{cell.ljust(attr_width)}{COLUMN} {reason}")
    elif data:
        for i, attr in enumerate(data, 1):
            print(f"  {i}. {attr}")
    else:
        print("  (No attributes suggested)")

    if verbose:
        if result.reasoning:
            _print_reasoning("\n💡 Overall Reasoning:", result.reasoning)
        else:
            print("\n💡 No reasoning available for this section")

    print("")


# =============================================================================
# Current vs Suggested
# =============================================================================

def display_comparison(
    title: str,
    current: List[str],
    result: ConfigResult,
    verbose: bool = False,
) -> None:
    """Print the index's current setting next to the suggestion, then the differences."""
    print(title)
    print(HEAVY_RULE * 50)

    suggested = _data(result)
    rows = max(len(current), len(suggested))

    current_cells = [_numbered(current, i) for i in range(rows)]
    suggested_cells = [_numbered(suggested, i) for i in range(rows)]
    has_reasons = bool(result.attribute_reasons)

    current_width = _width("📍 CURRENT", current_cells, 20)
    suggested_width = _width("🤖 AI SUGGESTED", suggested_cells, 25)

    print("")
    if has_reasons:
        reasons = [
            (result.reason_for(suggested[i]) if i < len(suggested) else None) or "No reason provided"
            for i in range(rows)
        ]
        reason_width = _width("REASON", reasons, 30)

        print(f"{'📍 CURRENT'.ljust(current_width)}{COLUMN} {'🤖 AI SUGGESTED'.ljust(suggested_width)}{COLUMN} REASON")
        print(RULE * current_width + CROSS + RULE * suggested_width + CROSS + RULE * reason_width)
        for cur, sug, reason in zip(current_cells, suggested_cells, reasons):
            print(f"{cur.ljust(current_width)}{COLUMN} {sug.ljust(suggested_width)}{COLUMN} {reason}")

        if not current:
            print(f"{'(No current config)'.ljust(current_width)}{COLUMN} {''.ljust(suggested_width)}{COLUMN}")
        if not suggested:
            print(f"{''.ljust(current_width)}{COLUMN} {'(No AI suggestions)'.ljust(suggested_width)}{COLUMN}")
    else:
        print(f"{'📍 CURRENT'.ljust(current_width)}{COLUMN} 🤖 AI SUGGESTED")
        print(RULE * current_width + CROSS + RULE * suggested_width)
        for cur, sug in zip(current_cells, suggested_cells):
            print(f"{cur.ljust(current_width)}{COLUMN} {sug}")

        if not current:
            print(f"{'(No current config)'.ljust(current_width)}{COLUMN} ")
        if not suggested:
            print(f"{''.ljust(current_width)}{COLUMN} (No AI suggestions)")

    _print_differences(find_differences(current, suggested), "🔍 Key Differences:", "✅ Configurations match!")

    if verbose:
        if result.reasoning:
            _print_reasoning("\n💡 AI Overall Reasoning:", result.reasoning)
        else:
            print("\n💡 No reasoning available for this section")

    print("")


# =============================================================================
# Model vs Model
# =============================================================================

def display_dual_model_comparison(
    title: str,
    first: Optional[ConfigResult],
    second: Optional[ConfigResult],
    first_model: str,
    second_model: str,
    verbose: bool = False,
) -> None:
    """Print two models' suggestions side by side, then their differences."""
    print(title)
    print(HEAVY_RULE * 50)

    first_data = _data(first)
    second_data = _data(second)
    rows = max(len(first_data), len(second_data))

    first_header = f"🤖 {first_model.upper()}"
    second_header = f"🤖 {second_model.upper()}"
    first_cells = [_numbered(first_data, i, blank_when_missing=True) for i in range(rows)]
    second_cells = [_numbered(second_data, i, blank_when_missing=True) for i in range(rows)]

    first_width = _width(first_header, first_cells, 25)
    second_width = _width(second_header, second_cells, 25)

    has_reasons = any(result is not None and result.attribute_reasons for result in (first, second))

    print("")
    if has_reasons:
        reasons = []
        for i in range(rows):
            reason = None
            if first is not None and i < len(first_data):
                reason = first.reason_for(first_data[i])
            if not reason and second is not None and i < len(second_data):
                reason = second.reason_for(second_data[i])
            reasons.append(reason or "No reason provided")
        reason_width = _width("REASON", reasons, 30)

        print(f"{first_header.ljust(first_width)}{COLUMN} {second_header.ljust(second_width)}{COLUMN} REASON")
        print(RULE * first_width + CROSS + RULE * second_width + CROSS + RULE * reason_width)
        for one, two, reason in zip(first_cells, second_cells, reasons):
            print(f"{one.ljust(first_width)}{COLUMN} {two.ljust(second_width)}{COLUMN} {reason}")

        if not first_data:
            print(f"{'(No suggestions)'.ljust(first_width)}{COLUMN} {''.ljust(second_width)}{COLUMN}")
        if not second_data:
            print(f"{''.ljust(first_width)}{COLUMN} {'(No suggestions)'.ljust(second_width)}{COLUMN}")
    else:
        print(f"{first_header.ljust(first_width)}{COLUMN} {second_header}")
        print(RULE * first_width + CROSS + RULE * second_width)
        for one, two in zip(first_cells, second_cells):
            print(f"{one.ljust(first_width)}{COLUMN} {two}")

        if not first_data:
            print(f"{'(No suggestions)'.ljust(first_width)}{COLUMN}")
        if not second_data:
            print(f"{''.ljust(first_width)}{COLUMN} (No suggestions)")

    _print_differences(find_differences(first_data, second_data), "🔍 Key Differences:", "✅ Model outputs match!")

    if verbose:
        _print_model_reasoning((first, second), (first_model, second_model), "💡 Model Overall Reasoning:")

    print("")


def display_triple_comparison(
    title: str,
    current: List[str],
    first: Optional[ConfigResult],
    second: Optional[ConfigResult],
    first_model: str,
    second_model: str,
    verbose: bool = False,
) -> None:
    """Print the current setting and two models' suggestions in three columns."""
    print(title)
    print(HEAVY_RULE * 80)

    first_data = _data(first)
    second_data = _data(second)
    rows = max(len(current), len(first_data), len(second_data))

    current_header = "📍 CURRENT"
    first_header = f"🤖 {first_model.upper()}"
    second_header = f"🤖 {second_model.upper()}"

    current_cells = [_numbered(current, i, blank_when_missing=True) for i in range(rows)]
    first_cells = [_numbered(first_data, i, blank_when_missing=True) for i in range(rows)]
    second_cells = [_numbered(second_data, i, blank_when_missing=True) for i in range(rows)]

    current_width = _width(current_header, current_cells, 20)
    first_width = _width(first_header, first_cells, 20)
    second_width = _width(second_header, second_cells, 20)

    print("")
    print(f"{current_header.ljust(current_width)}{COLUMN} {first_header.ljust(first_width)}{COLUMN} {second_header}")
    print(RULE * current_width + CROSS + RULE * first_width + CROSS + RULE * second_width)
    for cur, one, two in zip(current_cells, first_cells, second_cells):
        print(f"{cur.ljust(current_width)}{COLUMN} {one.ljust(first_width)}{COLUMN} {two}")

    if not current:
        print(f"{'(No current config)'.ljust(current_width)}{COLUMN} {''.ljust(first_width)}{COLUMN}")
    if not first_data:
        print(f"{''.ljust(current_width)}{COLUMN} {'(No suggestions)'.ljust(first_width)}{COLUMN}")
    if not second_data:
        print(f"{''.ljust(current_width)}{COLUMN} {''.ljust(first_width)}{COLUMN} (No suggestions)")

    _print_differences(
        find_differences(first_data, second_data),
        f"🔍 Differences between {first_model} and {second_model}:",
        "✅ AI model outputs match!",
    )

    if verbose:
        _print_model_reasoning((first, second), (first_model, second_model), "💡 Model Reasoning:")

    print("")


# =============================================================================
# Costs
# =============================================================================

def format_cost_summary(summary: CostSummary) -> str:
    """Render a cost summary; the per-model breakdown only appears for multi-model runs."""
    usage = summary.total_usage
    lines = [
        "",
        "💰 Cost Summary",
        HEAVY_RULE * 50,
        f"Total Cost: ${summary.total_cost:.4f}",
        f"Total Tokens: {usage.total_tokens:,}",
        f"  • Input: {usage.input_tokens:,}",
        f"  • Output: {usage.output_tokens:,}",
    ]

    if len(summary.costs_by_model) > 1:
        lines.append("")
        lines.append("By Model:")
        for model_name, data in summary.costs_by_model.items():
            lines.append(f"  • {model_name}: ${data.cost:.4f} ({data.usage.total_tokens:,} tokens)")

    return "\n".join(lines) + "\n"
