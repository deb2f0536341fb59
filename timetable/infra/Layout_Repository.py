import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from timetable.domain.Layout import Layout, REFERENCE_LAYOUT
from timetable.utilities.config import TIMETABLE_LAYOUT_FILE
from timetable.utilities.validators import LayoutInput

logger = logging.getLogger(__name__)


def reading_from_layout(path: Optional[Path] = TIMETABLE_LAYOUT_FILE) -> Layout:
    """Read the day layout from a JSON file, falling back to the reference layout.

    The file holds either a list of rows or an object with a "rows" list.
    """
    if path is None:
        return REFERENCE_LAYOUT
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
        rows = LayoutInput.model_validate(raw if isinstance(raw, dict) else {"rows": raw}).rows
        layout = Layout.from_dict([row.model_dump() for row in rows])
        logger.info(f"Loaded layout with {layout.period_count} periods from {path}")
        return layout
    except FileNotFoundError:
        logger.warning(f"Layout file not found: {path}. Using reference layout.")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in layout file: {e}")
    except ValidationError as e:
        logger.error(f"Invalid layout rows in {path}: {e}")
    except ValueError as e:
        logger.error(f"Inconsistent layout in {path}: {e}")
    return REFERENCE_LAYOUT
