from app.schemas.assets import AssetRole, Language

# ---- ANALYZE: merge the non-face references into one scene description ----
ANALYZE_PROMPT = """
You are a Lead Visual Director for a high-end fashion shoot.
Your task is to analyze the provided reference images and combine them into a SINGLE, cohesive visual description for a generative AI model.

I will provide images labeled by their category (e.g., Clothing, Shoes, Style, Hairstyle).
You must merge these elements into a scene description.

DIRECTIVES:
1. If 'Style/Background' is provided, describe the lighting, location, and camera angle in detail.
2. If 'Clothing' or 'Shoes' are provided, describe their fabric, cut, color, and how they fit on a model.
3. If 'Hairstyle' is provided, describe the hair texture and cut.
4. If 'Accessories' are provided, include them naturally.

{language_instruction}

OUTPUT FORMAT:
Return ONLY the descriptive paragraph. Do not add intro/outro text.
""".strip()

LANGUAGE_INSTRUCTIONS = {
    Language.en: "Output the final detailed description in English.",
    Language.ru: "Output the final detailed description strictly in Russian.",
}

ANALYZE_LABELS = {
    AssetRole.style: "TARGET STYLE / ENVIRONMENT",
    AssetRole.clothing: "CLOTHING TO WEAR",
    AssetRole.shoes: "SHOES TO WEAR",
    AssetRole.accessories: "ACCESSORIES",
    AssetRole.hairstyle: "HAIRSTYLE",
}

# ---- GENERATE: fuse the face into the described scene ----
COMPOSITE_PROMPT = """
You are an expert CGI Artist and Photographer.
TASK: Create a photorealistic composite image based on the provided references.

CORE INSTRUCTION:
Synthesize a single image that combines the anatomical features of the [FACE_REFERENCE] with the aesthetic elements of the other references.

STRICT ASSET MAPPING:
1. FACE / IDENTITY: The generated person MUST have the facial structure, ethnicity, and key features of [FACE_REFERENCE]. This is the most critical requirement.
2. OUTFIT: The person MUST be wearing the exact items shown in [CLOTHING_REFERENCE], [SHOES_REFERENCE] and [ACCESSORIES_REFERENCE] when provided. Maintain fabric texture and details. Do NOT invent items that were not provided.
3. SCENE: If [STYLE_REFERENCE] is provided, the background, lighting, and mood must match it.
4. HAIR: If [HAIRSTYLE_REFERENCE] is provided, adapt that hair onto the subject.

SCENE DESCRIPTION:
"{scene}"

TECHNICAL PARAMETERS:
- Style: Photorealistic, 8k resolution, cinematic lighting.
- Shot: Medium shot or Full body (depending on visible clothing).
- Integrity: Ensure the face blends naturally with the neck and lighting of the scene.
""".strip()

FACE_LABEL = "Reference 1: [FACE_REFERENCE] - Use this for facial identity."

# (label, instruction) per non-face role
COMPOSITE_LABELS = {
    AssetRole.style: ("STYLE_REFERENCE", "Use this for background and lighting."),
    AssetRole.clothing: ("CLOTHING_REFERENCE", "Copy the exact design of this outfit."),
    AssetRole.shoes: ("SHOES_REFERENCE", "Copy the exact design of this footwear."),
    AssetRole.accessories: ("ACCESSORIES_REFERENCE", "Include these accessories."),
    AssetRole.hairstyle: ("HAIRSTYLE_REFERENCE", "Use this hairstyle."),
}

# every filter category off
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_CIVIC_INTEGRITY", "threshold": "BLOCK_NONE"},
]
