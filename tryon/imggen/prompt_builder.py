"""Prompt construction helpers for the try-on edit call."""

from __future__ import annotations

from typing import Iterable


class TryOnPromptBuilder:
    """Builds the instruction sent alongside the subject and garment photos."""

    def build(
        self,
        *,
        subject_filename: str,
        garment_filename: str,
        extra_instructions: Iterable[str] | None = None,
    ) -> str:
        """Return a natural-language instruction for dressing the subject in the garment."""

        instructions = (
            "You will receive two photos. "
            f"The first one (file {subject_filename}) shows a person. "
            f"The second one (file {garment_filename}) shows a single garment. "
            "Edit the first photo so that the person is wearing exactly this garment."
        )
        constraints = (
            "Keep the face, hair, body shape, pose and background of the person unchanged. "
            "Do not change the colour, pattern or cut of the garment and do not add other clothing items."
        )
        extras = " ".join(extra_instructions or [])
        return " ".join(
            part
            for part in [
                instructions,
                constraints,
                "The result must look like a realistic photograph with natural lighting.",
                extras,
            ]
            if part
        ).strip()
