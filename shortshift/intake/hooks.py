"""Opening-hook tips shown next to the intake form."""

GENERIC_HOOKS = (
    "Hook the viewer within the first second.",
    "Show the end result first, then rewind.",
    "End on a punchy CTA that fits the story.",
)


def recommended_hooks(title: str) -> list[str]:
    """Suggest how to open a Short with the given title."""
    words = title.split()
    if not words:
        return list(GENERIC_HOOKS)

    hook = words[0].upper()
    return [
        f'Open with an on-screen caption: "{hook} in 30 seconds".',
        "Cut to your strongest visual immediately.",
        "Layer upbeat music under the first three seconds.",
    ]
