"""Pydantic model for a question schema extracted from a live form.

The schema collaborator produces one ``ExtractedQuestion`` per question
container, in page order.  It is the input for default-config generation;
weights and word banks are added afterwards by the user.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class ExtractedQuestion(BaseModel):
    """A question as rendered by the form.

    ``type`` is one of the canonical question kinds, or ``None`` when the
    container holds no control the extractor recognises.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    index: int
    title: str = ""
    type: Optional[str] = None
    # option value -> display label (choice kinds only)
    options: Dict[str, str] = {}
