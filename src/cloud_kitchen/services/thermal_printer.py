"""
Форматирование текста для 58-мм термопринтера.

Ширина ленты около 28 символов моноширинного шрифта, поэтому все функции
по умолчанию работают с PRINTER_WIDTH.
"""
import html
from decimal import Decimal
from typing import List, Union

PRINTER_WIDTH = 28


def center_text(text: str, width: int = PRINTER_WIDTH) -> str:
    if len(text) >= width:
        return text
    left = (width - len(text)) // 2
    right = width - len(text) - left
    return " " * left + text + " " * right


def right_align(text: str, width: int = PRINTER_WIDTH) -> str:
    if len(text) >= width:
        return text
    return " " * (width - len(text)) + text


def split_line(left: str, right: str, width: int = PRINTER_WIDTH) -> str:
    """
    Левый текст прижат влево, правый вправо, длина строки всегда width.
    Если не помещается, режем левый, а правый длиннее width - 1 тоже режем.
    """
    right = right[: max(0, width - 1)]
    if len(left) + len(right) >= width:
        return left[: max(0, width - len(right) - 1)] + " " + right
    return left + " " * (width - len(left) - len(right)) + right


def separator(char: str = "-", width: int = PRINTER_WIDTH) -> str:
    return char * width


def format_currency(amount: Union[Decimal, int, float]) -> str:
    return f"Rs.{Decimal(str(amount)):.2f}"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def wrap_text(text: str, width: int = PRINTER_WIDTH) -> List[str]:
    """
    Переносит текст по словам. Слово длиннее width режется на куски,
    так что ни одна строка не длиннее width.
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ""
            lines.append(word[:width])
            word = word[width:]
        if not word:
            continue
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines


_PRINT_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Print</title>
  <style>
    @page {{ size: 58mm auto; margin: 0; }}
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    html, body {{ width: 58mm; background: white; }}
    body {{
      padding: 1mm 2mm;
      font-family: 'DejaVu Sans Mono', 'Consolas', 'Liberation Mono', 'Courier New', monospace;
      font-size: 8pt;
      line-height: 1.2;
      color: black;
    }}
    pre {{ font-family: inherit; font-size: 8pt; line-height: 1.2; white-space: pre; overflow-x: hidden; }}
  </style>
</head>
<body>
  <pre>{content}</pre>
</body>
</html>
"""


def generate_print_html(content: str) -> str:
    """HTML-страница под ширину ленты 58 мм с чеком внутри <pre>."""
    return _PRINT_PAGE.format(content=html.escape(content))
