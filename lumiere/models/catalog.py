"""Fixed style presets and pose sequence."""

from enum import Enum


class FashionStyle(str, Enum):
    """Aesthetic presets blended into the generation instruction."""

    MINIMALIST = "Minimalist Studio, clean background, soft lighting"
    STREETWEAR = "Urban Street Style, city background, natural light, candid"
    AVANT_GARDE = "Avant-Garde, surreal elements, dramatic high-contrast lighting"
    VINTAGE = "Vintage 90s Editorial, film grain, flash photography"
    LUXURY = "Luxury Glamour, golden hour, opulent setting"

    @property
    def label(self) -> str:
        """Short display name (text before the first comma)."""
        return self.value.split(",")[0]


DEFAULT_STYLE = FashionStyle.MINIMALIST


# 10 distinct editorial poses, generated in this order
POSES: tuple[str, ...] = (
    "Full body shot, walking towards the camera with a confident stride (Street Style motion).",
    "Three-quarter shot, standing with hands in pockets or resting on hips, looking slightly away from camera.",
    "Seated pose on a prop (chair or stairs), relaxed posture, highlighting the outfit drapery.",
    "Close-up portrait focus (waist up), intense eye contact, highlighting textures.",
    "Low angle hero shot, standing tall and empowering, looking down at the lens.",
    "Dynamic movement shot, fabric flowing, caught mid-turn or mid-step.",
    "Over-the-shoulder shot, looking back at the camera, showcasing back details or profile.",
    "Leaning against a wall or surface, casual yet chic, one leg crossed over the other.",
    "High angle artistic shot, looking up towards the camera.",
    "Side profile silhouette, highlighting the structural shape of the outfit.",
)
