"""
Prompt templates sent to the generative endpoints.

The attribute prompt is rendered from the category vocabulary so the
model answers with the same keys and options as the quiz.
"""

from snaptheplant.core.config import category_vocabulary, PLANT_CATEGORIES

ATTRIBUTE_PROMPT = """\
You are an expert biologist and botanist. Your task is to analyze the provided image of a {category} and determine its visual characteristics based on a predefined set of questions, as if you were answering a quiz.

Questions:
{questions}

If the image is a close-up or partial view, focus on the visible features and do not guess attributes that are not visible.
Your output MUST be a JSON object of the form {{"attributes": {{"<key>": "<option>"}}}} where each value is the single best option chosen from the list.
"""

IDENTIFY_PROMPT = """\
You are an expert biologist and botanist. Your main goal is to identify the species in the provided image.

Analyze the image of a {category} and identify its common name ("name") and scientific name ("scientificName").
Also provide a brief, interesting paragraph of "keyInformation" about the species.

Determine if the species is known to be poisonous, venomous, or otherwise harmful to humans or common pets (like cats and dogs) and set "isPoisonous". If you are unsure, default to false.
If it IS poisonous, provide a brief "toxicityWarning". Otherwise, leave it null.

{care_tips_instruction}

Do not guess. If the image is unclear or you cannot make a confident identification, return an empty object.
"""

CARE_TIPS_INSTRUCTION = (
    'Provide a list of "careTips" objects with "title" and "description". '
    "Titles should be standard, such as 'Watering', 'Sunlight', and 'Soil'."
)
NO_CARE_TIPS_INSTRUCTION = 'Provide an empty array for "careTips".'

IMAGE_PROMPT = (
    "Generate a realistic, high-quality, vibrant, detailed photo of a {name}, "
    "which is a type of {category}. The subject should be clearly visible and "
    "centered. The background should be natural and slightly blurred."
)

STORY_PROMPT = (
    "Write a short, imaginative, and simple story for a child (around 5-7 years old) "
    "about a {name}, which is a type of {category}. The story should be 3-4 paragraphs "
    "long and have a whimsical or adventurous tone."
)

FALLBACK_STORY = (
    "Once upon a time, in a sunny garden, there was a lovely {name}. "
    "It was a very special {category} that loved to watch the world go by."
)


def render_attribute_prompt(category: str) -> str:
    lines = []
    for index, (key, options) in enumerate(category_vocabulary(category).items(), start=1):
        choices = ", ".join(f'"{option}"' for option in options)
        lines.append(f'{index}. {key.replace("_", " ")} (key: "{key}", options: {choices})')
    return ATTRIBUTE_PROMPT.format(category=category, questions="\n".join(lines))


def render_identify_prompt(category: str) -> str:
    instruction = CARE_TIPS_INSTRUCTION if str(category) in PLANT_CATEGORIES else NO_CARE_TIPS_INSTRUCTION
    return IDENTIFY_PROMPT.format(category=category, care_tips_instruction=instruction)
