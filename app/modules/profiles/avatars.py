"""Avatar glyphs a profile may pick from."""

DEFAULT_AVATAR = "🧑‍💻"

AVATARS = [
    "🧑‍💻", "👩‍💻", "👨‍💻", "👩‍🔬", "👨‍🔬", "🤖", "🦊", "🐱",
    "🦁", "🐸", "🐼", "🦄", "🐲", "🦅", "🐺", "🐙",
    "👾", "🎮", "🚀", "⚡", "🔥", "💎", "🎯", "🛡️",
]


def is_valid_avatar(emoji: str) -> bool:
    return emoji in AVATARS
