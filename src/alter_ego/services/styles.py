"""Style grid selection and shuffling."""

import random
from dataclasses import dataclass, field

from alter_ego.domain.styles import ALL_STYLES, DEFAULT_STYLES, WILDCARD_STYLE, Style

SHUFFLE_SIZE = 5


@dataclass
class StylePicker:
    """Tracks which styles are shown and which of them are selected."""

    rng: random.Random = field(default_factory=random.Random)
    current_styles: list[Style] = field(default_factory=lambda: list(DEFAULT_STYLES))
    selected: set[str] = field(
        default_factory=lambda: {style.caption for style in DEFAULT_STYLES}
    )

    def reset(self) -> None:
        self.current_styles = list(DEFAULT_STYLES)
        self.selected = {style.caption for style in self.current_styles}

    def toggle(self, caption: str) -> bool:
        """Flip selection for a shown style and return whether it is selected."""
        if not any(style.caption == caption for style in self.current_styles):
            return False
        if caption in self.selected:
            self.selected.discard(caption)
            return False
        self.selected.add(caption)
        return True

    def shuffle(self) -> None:
        """Show a fresh random set of styles plus the wildcard, all selected."""
        shown = {style.caption for style in self.current_styles}
        remaining = [style for style in ALL_STYLES if style.caption not in shown]
        picked = self.rng.sample(remaining, min(SHUFFLE_SIZE, len(remaining)))
        styles = [*picked, WILDCARD_STYLE]
        self.rng.shuffle(styles)
        self.current_styles = styles
        self.selected = {style.caption for style in styles}

    def selected_captions(self) -> list[str]:
        """Return selected captions in grid order."""
        return [
            style.caption
            for style in self.current_styles
            if style.caption in self.selected
        ]
