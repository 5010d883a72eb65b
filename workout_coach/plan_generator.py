"""
AI-powered workout plan generation using Claude API.
"""

import anthropic
import json
import re
from workout_coach.errors import ConfigError, ParseError, ShapeError, TransportError
from workout_coach.plan_validator import validate_plan


JSON_PREFILL = "{"


def _strip_code_fences(text):
    text = (text or "").strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
        text = text.strip()
    return text


def _migrate_legacy_shape(data, training_days):
    """
    Convert the old single-session {"mainWorkout": [...]} shape.

    Only a one-day plan maps onto it unambiguously; anything else is rejected.
    """
    if not isinstance(data, dict) or "days" in data or "mainWorkout" not in data:
        return data

    if training_days != 1:
        violation = {
            "code": "legacy_main_workout",
            "message": (
                f'Plan uses the single-session "mainWorkout" shape but {training_days} '
                f'training days were requested.'
            ),
            "day": "",
            "exercise": "",
        }
        raise ShapeError(violation["message"], violations=[violation])

    return {"days": {"1": data["mainWorkout"]}}


def parse_plan_response(text, training_days, truncated=False):
    """
    Parse and validate the model's text into a WorkoutPlan.

    Args:
        text: Raw completion text
        training_days: Number of days the plan must cover
        truncated: True when the model stopped at the token limit

    Returns:
        Validated WorkoutPlan

    Raises:
        ParseError: empty response or invalid JSON
        ShapeError: valid JSON that is not a valid plan
    """
    cleaned = _strip_code_fences(text)
    if not cleaned:
        raise ParseError("Claude returned an empty response.", raw_text=text or "")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        if truncated:
            message = f"Claude's response was cut off at the token limit and is not valid JSON ({exc})."
        else:
            message = f"Claude's response is not valid JSON ({exc})."
        raise ParseError(message, raw_text=text) from exc

    if not isinstance(data, dict):
        violation = {
            "code": "not_an_object",
            "message": f"Expected a JSON object, got {type(data).__name__}.",
            "day": "",
            "exercise": "",
        }
        raise ShapeError(violation["message"], violations=[violation])

    data = _migrate_legacy_shape(data, training_days)

    validation = validate_plan(data, training_days)
    violations = validation["violations"]
    if violations:
        first = violations[0]["message"]
        more = f" (+{len(violations) - 1} more)" if len(violations) > 1 else ""
        raise ShapeError(f"Invalid workout plan: {first}{more}", violations=violations)

    return validation["plan"]


class PlanGenerator:
    """Generates workout plans using Claude AI."""

    def __init__(self, api_key, config, model=None, max_tokens=None, timeout=None, client=None):
        """
        Initialize the plan generator.

        Args:
            api_key: Anthropic API key
            config: Configuration dictionary (uses the 'claude' section)
            model: Claude model to use (defaults to config value)
            max_tokens: Maximum tokens for response (defaults to config value)
            timeout: Client timeout in seconds (defaults to config value)
            client: Pre-built client, mainly for tests
        """
        claude_config = config.get('claude', {}) or {}
        self.model = model or claude_config.get('model')
        if not self.model:
            raise ConfigError("claude.model is not set in config.yaml")
        self.client = client or anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout or claude_config.get('timeout', 60),
            max_retries=claude_config.get('max_retries', 1),
        )
        self.max_tokens = max_tokens or claude_config.get('max_tokens', 2000)
        self.temperature = claude_config.get('temperature', 0.2)
        self.prefill_json = claude_config.get('prefill_json', True)
        self.config = config

    def _build_messages(self, payload):
        messages = payload.to_messages()
        if self.prefill_json:
            messages.append({"role": "assistant", "content": JSON_PREFILL})
        return messages

    def _request_completion(self, payload):
        """Send one Messages API request. SDK failures become TransportError."""
        try:
            return self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=payload.system,
                messages=self._build_messages(payload),
            )
        except anthropic.APIStatusError as e:
            print(f"Error calling Claude API: {e}")
            raise TransportError(
                f"Claude API returned HTTP {e.status_code}: {e.message}",
                status_code=e.status_code,
            ) from e
        except anthropic.APIError as e:
            print(f"Error calling Claude API: {e}")
            raise TransportError(f"Could not reach Claude API: {e}") from e

    def _completion_text(self, message):
        blocks = getattr(message, "content", None) or []
        text = "".join(
            block.text for block in blocks
            if getattr(block, "type", None) == "text" and block.text
        )
        if not text.strip():
            return ""
        # The completion continues after the prefilled brace unless the model restated it.
        if self.prefill_json and not text.lstrip().startswith(JSON_PREFILL):
            text = JSON_PREFILL + text
        return text

    def generate_plan(self, payload):
        """
        Generate a workout plan for one prompt payload.

        Args:
            payload: PromptPayload from build_prompt_payload

        Returns:
            Validated WorkoutPlan

        Raises:
            TransportError, ParseError or ShapeError
        """
        print(f"\n🤖 Generating a {payload.training_days}-day workout plan with Claude AI...")

        message = self._request_completion(payload)
        truncated = getattr(message, "stop_reason", None) == "max_tokens"
        text = self._completion_text(message)

        try:
            plan = parse_plan_response(text, payload.training_days, truncated=truncated)
        except (ParseError, ShapeError) as e:
            print(f"Error reading workout plan: {e}")
            raise

        print(f"✓ Workout plan generated: {len(plan.days)} day(s), {plan.total_exercises} exercises.\n")
        return plan
