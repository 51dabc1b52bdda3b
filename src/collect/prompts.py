"""Instructions for producing structured input with an external assistant."""

STRUCTURED_INPUT_PROMPT = """# Content consumption research

## Goal
Find, as completely as possible, the books a given person has read, the films
and series they have watched, the games they have played and the music they
have listened to, using public sources on the web.

## Output format (strict)
```json
[
  {
    "type": "BOOK",
    "title": "Title(Creator)",
    "body": "How they came to it, or their review",
    "source": "https://source.example/url"
  }
]
```

### Field rules
- **type**: one of `BOOK` | `VIDEO` | `GAME` | `MUSIC` (required)
- **title**: "Title(Creator)" form, e.g. "Demian(Hermann Hesse)", "Parasite(Bong Joon-ho)"
- **body**: the context in which they mentioned it, or their review. Use \\n for line breaks
- **source**: URL of the source of this information (required)

## Writing the body

### When it describes how they came to the work
- Do not stop at "mentioned it in an interview"
- Include why they picked it up, how it affected them and in what context it came up
- Quote their own words exactly in double quotes
- Assume the reader does not know the work and give brief background

### When it is a review
- Stick to the evaluation and impressions they gave themselves

## Structure rules (important)
- **One work per item**: never bundle several works into one body
- **No vague mentions**: "likes Haruki Murakami's books" is not acceptable
  - A specific title is required; if none is named, use the creator's best-known work
    and say in the body that no specific work was mentioned
- If the same work appears in several sources, keep only the most detailed one
- Every item must read on its own (no references to other items)

## Search scope
- Interviews, articles, social media, video, podcasts, their own writing and any other public material
- Search as broadly as possible in a single pass

---
Print the JSON array first; put any additional commentary after the array.
"""


def structured_input_prompt() -> str:
    """Return the prompt text users paste into an assistant to get JSON input."""
    return STRUCTURED_INPUT_PROMPT
