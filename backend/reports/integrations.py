"""
External collaborators used while a report is being submitted.

Each collaborator has a narrow contract and signals any failure by
raising ``EnrichmentFailed``; the submission workflow absorbs it and
falls back to a default.

- Media store:         bytes + mime type → public URL
- Priority classifier: free text → one of ``Priority`` labels
- Location provider:   reporter → (latitude, longitude)

Concrete classes are chosen through the ``REPORTS_MEDIA_STORE``,
``REPORTS_PRIORITY_CLASSIFIER`` and ``REPORTS_LOCATION_PROVIDER``
settings (dotted paths).
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Protocol

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from core.domain.exceptions import EnrichmentFailed

from .models import Priority

logger = logging.getLogger(__name__)


class MediaStore(Protocol):
    def upload(self, data: bytes, mime_type: str) -> str: ...


class PriorityClassifier(Protocol):
    def classify(self, text: str) -> str: ...


class LocationProvider(Protocol):
    def locate(self, actor: Any) -> tuple[float, float]: ...


def _timeout() -> float:
    return float(getattr(settings, "INTEGRATION_TIMEOUT", 10))


# ═══════════════════════════════════════════════════════════════════
#  Media upload
# ═══════════════════════════════════════════════════════════════════


_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "audio/m4a": "m4a",
    "audio/mp4": "m4a",
    "audio/mpeg": "mp3",
    "audio/wav": "wav",
}


class CloudinaryMediaStore:
    """
    Unsigned upload to Cloudinary's ``auto/upload`` endpoint.

    Needs ``CLOUDINARY_CLOUD_NAME`` and ``CLOUDINARY_UPLOAD_PRESET``.
    """

    UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud}/auto/upload"

    def __init__(self, cloud_name: str | None = None, upload_preset: str | None = None):
        self.cloud_name = cloud_name if cloud_name is not None else getattr(settings, "CLOUDINARY_CLOUD_NAME", "")
        self.upload_preset = upload_preset if upload_preset is not None else getattr(settings, "CLOUDINARY_UPLOAD_PRESET", "")

    def upload(self, data: bytes, mime_type: str) -> str:
        if not self.cloud_name or not self.upload_preset:
            raise EnrichmentFailed("Cloudinary is not configured.", step="media")

        ext = _EXTENSIONS.get(mime_type, "bin")
        filename = f"upload-{uuid.uuid4()}.{ext}"
        try:
            response = requests.post(
                self.UPLOAD_URL.format(cloud=self.cloud_name),
                data={"upload_preset": self.upload_preset},
                files={"file": (filename, data, mime_type)},
                timeout=_timeout(),
            )
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise EnrichmentFailed(f"Media upload failed: {exc}", step="media") from exc

        if not isinstance(payload, dict):
            raise EnrichmentFailed(
                f"Media upload returned an unexpected body ({response.status_code}).", step="media",
            )
        if response.status_code >= 400 or "error" in payload:
            raise EnrichmentFailed(
                f"Media upload rejected ({response.status_code}): {payload.get('error')}",
                step="media",
            )

        url = payload.get("secure_url")
        if not url:
            raise EnrichmentFailed("Media upload returned no URL.", step="media")
        return url


# ═══════════════════════════════════════════════════════════════════
#  Priority classification
# ═══════════════════════════════════════════════════════════════════


def normalize_priority(raw: str) -> str:
    """
    Map a free-form model answer onto a ``Priority`` label.

    Accepts answers such as ``"high"``, ``" Medium."`` or
    ``"not specified"``; anything else raises ``EnrichmentFailed``.
    """
    cleaned = " ".join(raw.strip().strip(".!\"'").split()).lower()
    for label in Priority.values:
        if cleaned == label.lower():
            return label
    raise EnrichmentFailed(f"Unrecognised priority label: {raw!r}", step="priority")


class ChatCompletionPriorityClassifier:
    """
    Asks an OpenAI-compatible chat-completions endpoint for a one-word
    priority.

    Needs ``PRIORITY_CLASSIFIER_API_KEY``; ``PRIORITY_CLASSIFIER_URL`` and
    ``PRIORITY_CLASSIFIER_MODEL`` have defaults.
    """

    SYSTEM_PROMPT = (
        "You are an assistant that classifies civic issue reports into "
        "priority levels: High, Medium, or Low."
    )

    def __init__(self, url: str | None = None, api_key: str | None = None, model: str | None = None):
        self.url = url or getattr(settings, "PRIORITY_CLASSIFIER_URL", "")
        self.api_key = api_key if api_key is not None else getattr(settings, "PRIORITY_CLASSIFIER_API_KEY", "")
        self.model = model or getattr(settings, "PRIORITY_CLASSIFIER_MODEL", "gpt-4o-mini")

    def classify(self, text: str) -> str:
        if not self.url or not self.api_key:
            raise EnrichmentFailed("Priority classifier is not configured.", step="priority")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f'Description: "{text}". Based on urgency and impact, '
                        "return only one word: High, Medium, or Low."
                    ),
                },
            ],
            "max_tokens": 5,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(self.url, json=body, headers=headers, timeout=_timeout())
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            raise EnrichmentFailed(f"Priority request failed: {exc}", step="priority") from exc

        if not isinstance(content, str):
            raise EnrichmentFailed("Priority response was not text.", step="priority")
        return normalize_priority(content)


# ═══════════════════════════════════════════════════════════════════
#  Location
# ═══════════════════════════════════════════════════════════════════


class NoLocationProvider:
    """Server-side default: the device is the only source of coordinates."""

    def locate(self, actor: Any) -> tuple[float, float]:
        raise EnrichmentFailed("No location provider is configured.", step="location")


# ═══════════════════════════════════════════════════════════════════
#  Loaders
# ═══════════════════════════════════════════════════════════════════


def _load(setting_name: str, default: str):
    return import_string(getattr(settings, setting_name, default))()


def get_media_store() -> MediaStore:
    return _load("REPORTS_MEDIA_STORE", "reports.integrations.CloudinaryMediaStore")


def get_priority_classifier() -> PriorityClassifier:
    return _load(
        "REPORTS_PRIORITY_CLASSIFIER",
        "reports.integrations.ChatCompletionPriorityClassifier",
    )


def get_location_provider() -> LocationProvider:
    return _load("REPORTS_LOCATION_PROVIDER", "reports.integrations.NoLocationProvider")
