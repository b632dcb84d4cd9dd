from pathlib import Path


def load_prompt(prompt_name: str) -> str:
    """
    Load prompt from markdown file.
    """
    prompt_dir = Path(__file__).parent
    prompt_file = prompt_dir / f"{prompt_name}.md"

    if not prompt_file.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

    with open(prompt_file, "r", encoding="utf-8") as f:
        return f.read()


def get_car_extraction_prompt() -> str:
    """
    Get the prompt that reads a full listing from a car photo.
    """
    return load_prompt("car_extraction_prompt")


def get_image_search_prompt() -> str:
    """
    Get the prompt that reads search hints from a car photo.
    """
    return load_prompt("image_search_prompt")
