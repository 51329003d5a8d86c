import json

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01" + b"\x00" * 32


def responses_envelope(*texts):
    """Responses-API style body with one output_text part per text."""
    return json.dumps(
        {
            "output": [
                {"type": "reasoning", "summary": []},
                {
                    "type": "message",
                    "content": [{"type": "output_text", "text": t} for t in texts],
                },
            ]
        }
    ).encode("utf-8")
