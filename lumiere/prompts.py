"""Instruction template sent alongside the portrait and product images."""

from .models import FashionStyle


EDITORIAL_PROMPT_TEMPLATE = """
You are a visionary fashion director and photographer.

INPUTS:
1. **Model Reference** (First Image): Use this strictly for the model's **FACE, HAIR, SKIN TONE, and BODY PROPORTIONS**.
   - CRITICAL: The facial identity must remain consistent with this image.
   - IGNORE the clothes the model is wearing in this image. You are replacing them.

2. **Product References** (Subsequent Images): These are the **MANDATORY HERO ITEMS** the model is wearing.
   - CRITICAL: Preserve exact details, logos, textures, and cuts of these items. Do not hallucinate different versions.

GENERATION TASK:
Create a cohesive, high-fashion editorial image.
1. **Dress the Model**: Fit the 'Product References' onto the model in the specified pose.
2. **Complete the Styling**: GENERATE a totally new outfit for the rest of the model's body (pants, shoes, accessories, outerwear) that perfectly compliments the Hero Products.
   - The generated clothing must match the requested "{style}" aesthetic.
   - Do not leave the model wearing mismatched or casual clothes from the original photo. The entire outfit must be cohesive.

ART DIRECTION:
- **Pose**: {pose}
- **Aesthetic**: {style}
- **Quality**: Photorealistic, 8k, highly detailed textures, dramatic editorial lighting.
"""


def build_editorial_prompt(style: FashionStyle | str, pose_description: str) -> str:
    """Fill the editorial template for one (style, pose) pair."""
    style_text = style.value if isinstance(style, FashionStyle) else style
    return EDITORIAL_PROMPT_TEMPLATE.format(style=style_text, pose=pose_description)
