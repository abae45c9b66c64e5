"""Static style catalog."""

from dataclasses import dataclass

WILDCARD_CAPTION = "Surprise Me!"


@dataclass(frozen=True)
class Style:
    """A named visual transformation target."""

    caption: str
    description: str

    @property
    def is_wildcard(self) -> bool:
        return self.caption == WILDCARD_CAPTION


DEFAULT_STYLES: tuple[Style, ...] = (
    Style("1950s", "A dramatic, black and white Film Noir look with sharp shadows."),
    Style(
        "1970s", "Get ready for the disco floor with vibrant colors and a groovy vibe."
    ),
    Style(
        "1990s",
        "Embrace the alternative scene with a moody, grunge-inspired aesthetic.",
    ),
    Style("Victorian", "A formal, sepia-toned portrait from the age of invention."),
    Style("Future", "Step into a neon-lit, high-tech city of tomorrow."),
    Style(
        WILDCARD_CAPTION,
        "A random portal to an unknown style. What will you become?",
    ),
)

ALL_STYLES: tuple[Style, ...] = (
    Style(
        "1950s Film Noir",
        "Classic black & white with dramatic shadows and a mysterious mood.",
    ),
    Style("1970s Disco", "Vibrant, flashy, and ready for a night at the disco club."),
    Style(
        "1990s Grunge",
        "An edgy, alternative look with flannel, faded tones, and raw attitude.",
    ),
    Style(
        "Victorian Daguerreotype",
        "A haunting, early-photography style with sepia tones and a formal pose.",
    ),
    Style(
        "Futuristic Neon",
        "Bathed in the glowing lights of a high-tech, Blade Runner-esque city.",
    ),
    Style(
        "Renaissance Portrait",
        "Become a timeless masterpiece in the style of the old masters.",
    ),
    Style(
        "Ancient Greek Sculpture",
        "Chiselled from marble, a classic and heroic transformation.",
    ),
    Style(
        "Art Deco Poster",
        "Bold lines, geometric shapes, and the glamour of the Roaring Twenties.",
    ),
    Style("Cyberpunk Hero", "A high-tech rebel in a dystopian, neon-lit metropolis."),
    Style(
        "Steampunk Inventor",
        "An adventurer from an age of steam power and intricate clockwork.",
    ),
    Style(
        "Fantasy Elf", "An elegant and ethereal being from a realm of ancient magic."
    ),
    Style(
        "Pop Art Comic",
        "Bold dots, vibrant colors, and the action-packed style of a comic book.",
    ),
    Style(
        "Vaporwave Glitch",
        "A retro-futuristic aesthetic with glitched visuals and pastel tones.",
    ),
    Style(
        "Gothic Painting",
        "A dark, dramatic, and romantic style with a touch of melancholy.",
    ),
    Style(
        "Impressionist Artwork",
        "Soft, dreamy brushstrokes that capture the fleeting quality of light.",
    ),
    Style(
        "Surrealist Dreamscape",
        "A bizarre, fantastical, and mind-bending journey into the subconscious.",
    ),
    Style(
        "Tribal Warrior",
        "Adorned with intricate patterns and the fierce spirit of a warrior.",
    ),
    Style(
        "Wasteland Survivor",
        "A rugged hero navigating a gritty, post-apocalyptic world.",
    ),
    Style(
        "Minimalist Ink Wash",
        "A simple, elegant, and expressive style inspired by traditional calligraphy.",
    ),
    Style(
        "Psychedelic 60s Poster",
        "Swirling patterns, vibrant colors, and the free-spirited vibe of the "
        "Summer of Love.",
    ),
    Style(
        "Ancient Egyptian Papyrus",
        "Transformed into a figure from the time of pharaohs and pyramids.",
    ),
    Style(
        "Art Nouveau Illustration",
        "Elegant, flowing lines and ornate details inspired by nature.",
    ),
)

# Concrete targets the wildcard can resolve to.
SURPRISE_STYLES: tuple[str, ...] = (
    "1920s Art Deco",
    "1960s Psychedelic",
    "Cyberpunk",
    "Steampunk",
    "Fantasy Portrait",
    "Pop Art",
    "Anime",
    "Vaporwave",
)

WILDCARD_STYLE = next(style for style in DEFAULT_STYLES if style.is_wildcard)


def find_style(caption: str) -> Style:
    """Return the catalog style for a caption, or a placeholder for unknown ones."""
    for style in (*ALL_STYLES, *DEFAULT_STYLES):
        if style.caption == caption:
            return style
    return Style(caption, "A restored style.")
