"""AI rewrite of a recipe draft's instructions, optionally guided by a photo.

Unlike suggestions, failures here propagate: the UI shows them as an
"AI Error" alert and keeps the draft untouched.
"""

from typing import Optional

from cookbook.ai.images import prepare_image
from cookbook.engine.suggestion_engine import TextGenerator
from cookbook.models.models import InstructionContext
from cookbook.prompts.prompts import build_instruction_prompt
from cookbook.utils.logger import logger
from cookbook.utils.retry import with_retries


class InstructionAssistant:
    """Turns draft instructions into a clean numbered step list."""

    def __init__(self, client: TextGenerator, use_retries: bool = False) -> None:
        self.client = client
        self.use_retries = use_retries
        self._processing = 0

    @property
    def is_processing(self) -> bool:
        return self._processing > 0

    async def suggest_instructions(self, context: InstructionContext) -> str:
        """Rewrite `context.current_instructions`.

        Returns:
            The model's step list, stripped of surrounding whitespace.

        Raises:
            ImageError: If the attached image is not a usable JPEG/PNG.
            AIClientError: Any client failure (after retries, when enabled).
        """
        image: Optional[bytes] = prepare_image(context.image) if context.image is not None else None
        prompt = build_instruction_prompt(context)

        self._processing += 1
        try:
            if self.use_retries:
                text = await with_retries(
                    lambda: self.client.generate(prompt, image),
                    "Instruction rewrite",
                )
            else:
                text = await self.client.generate(prompt, image)
        finally:
            self._processing -= 1

        logger.info(f"Rewrote instructions for '{context.name}' ({len(text)} chars)")
        return text.strip()
