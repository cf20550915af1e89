DEFAULT_LANGUAGE = "Traditional Chinese (繁體中文)"

MAX_CHAPTERS = 5


def get_webpage_system_prompt(language: str = DEFAULT_LANGUAGE) -> str:
    """System prompt for the sentiment-analysis summary of a webpage."""
    return (
        "You are a sentiment-analysis assistant who helps the user keep up with what is happening online. "
        "Return your analysis as JSON only. "
        f"Write ALL output in {language}."
    )


def get_webpage_user_prompt(context: str) -> str:
    """Ask for a ``{"main": "", "comment": ""}`` object about ``context``."""
    prompt_lines = [
        "Your answer must use this JSON format and nothing else:",
        '`{"main":"","comment":""}`',
        "",
        "Fill each key as follows:",
        "- `main`: outline the main text in 50 to 150 characters",
        "- `comment`: analyze the reader comments or replies; if there are none, use an empty string",
        "",
        "---",
        "",
        context,
    ]
    return "\n".join(prompt_lines)


def get_video_system_prompt(language: str = DEFAULT_LANGUAGE) -> str:
    """System prompt for splitting a transcript into chapters."""
    return (
        "You are a video-explainer assistant who helps the user understand a video quickly. "
        "Return your analysis as a JSON array only. "
        f"Write ALL output in {language}."
    )


def get_video_user_prompt(transcript: str) -> str:
    """Ask for at most ``MAX_CHAPTERS`` ``{"time": "", "summarize": ""}`` entries."""
    prompt_lines = [
        "Your answer must use this JSON format and nothing else:",
        '`[{"time":"","summarize":""}]`',
        "",
        "Fill each key as follows:",
        "- `time`: the start time of the section",
        "- `summarize`: the gist of the section in 25 to 50 characters",
        "",
        f"Split the video into at most {MAX_CHAPTERS} sections, in chronological order.",
        "",
        "---",
        "",
        transcript,
    ]
    return "\n".join(prompt_lines)
