"""
Portrait edit demo.

Opens an image, applies a few adjustments, and writes the committed
artifact next to the input.

Usage:
    python examples/portrait_edit_demo.py <input_image> [output_image]
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from PE_Libs.errors import DecodeError, EncodeError
from PE_Libs.SessionLib import EditorConfig, PhotoEditor


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    input_path = Path(sys.argv[1])
    output_path = Path(sys.argv[2]) if len(sys.argv) >= 3 else input_path.with_name(f"edited_{input_path.stem}.png")

    if not input_path.is_file():
        print(f"Error: {input_path} is not a valid file")
        return

    saved = []
    editor = PhotoEditor(config=EditorConfig(export_format="PNG"))
    session = editor.open(input_path.read_bytes(), on_save=saved.append)

    if session.placeholder_text:
        print(session.placeholder_text)
        return

    # Simulate a slider drag; only the last value is rendered
    for value in range(100, 131, 5):
        session.set_brightness(value)
    session.set_saturation(80)
    session.rotate_right()
    session.toggle_flip_horizontal()

    preview = session.preview()
    print(f"Preview {preview.width}x{preview.height}, {session.render_count} render(s)")
    print(f"CSS equivalent: {session.state.to_css_filter()}")

    try:
        editor.save()
    except (DecodeError, EncodeError) as e:
        print(f"Error: {e}")
        return

    output_path.write_bytes(saved[0].data)
    print(f"Saved edited image to {output_path}")


if __name__ == "__main__":
    main()
