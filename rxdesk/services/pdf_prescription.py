# FILE: rxdesk/services/pdf_prescription.py
from __future__ import annotations

import logging
import re
from typing import Any, Optional, Tuple

from rxdesk.services.assets import AssetLoader
from rxdesk.services.entity_store import EntityStore
from rxdesk.services.errors import AssetLoadError
from rxdesk.services.pdfs.layout import layout_prescription
from rxdesk.services.pdfs.writer import write_pdf
from rxdesk.services.rx_assembler import assemble

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


def prescription_filename(patient_name: Optional[str]) -> str:
    """
    "Ravi  Kumar" -> "ravi_kumar.pdf"
    """
    slug = _WS.sub("_", (patient_name or "").strip().lower())
    return f"{slug or 'prescription'}.pdf"


# -------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------
def render_prescription_document(
    store: EntityStore,
    prescription_id: Any,
    *,
    assets: Optional[AssetLoader] = None,
) -> Tuple[bytes, str]:
    """
    Assemble -> load signature -> lay out -> serialise.

    Only NotFoundError (raised by assemble, before any bytes exist) is meant
    for the caller; a bad BMI or signature degrades inside the document.
    """
    model = assemble(store, prescription_id)

    signature = None
    ref = model.practitioner.signature_ref
    if ref:
        signature = (assets or AssetLoader()).load(ref)
        if isinstance(signature, AssetLoadError):
            logger.warning(
                "Signature unavailable for prescription %s (%s): %s",
                prescription_id, signature.ref, signature.reason)

    plan = layout_prescription(model, signature)
    pdf_bytes = write_pdf(plan)
    return pdf_bytes, prescription_filename(model.patient.name)
