import json
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx

from workout_coach.errors import ConfigError, ParseError, PlanGenerationError, ShapeError, TransportError
from workout_coach.models import UserSelection
from workout_coach.plan_generator import PlanGenerator, parse_plan_response
from workout_coach.request_builder import build_prompt_payload

CONFIG = {
    "claude": {
        "model": "claude-test",
        "max_tokens": 1500,
        "temperature": 0.2,
        "prefill_json": False,
    }
}

API_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _exercise(name):
    return {"name": name, "sets": 3, "reps": "8-10", "instructions": "Keep your core braced."}


def _three_day_plan_json():
    return json.dumps(
        {
            "days": {
                "1": [_exercise("Bench Press")],
                "2": [_exercise("Incline Dumbbell Press")],
                "3": [_exercise("Cable Fly")],
            }
        }
    )


def _message(text, stop_reason="end_turn"):
    content = [] if text is None else [SimpleNamespace(type="text", text=text)]
    return SimpleNamespace(content=content, stop_reason=stop_reason)


def _payload(training_days=3, **overrides):
    values = {
        "muscle_groups": ("Chest",),
        "goals": ("Build muscle",),
        "workout_type": "Gym",
        "training_days": training_days,
    }
    values.update(overrides)
    return build_prompt_payload(UserSelection(**values))


def _generator(response=None, config=None, side_effect=None):
    client = MagicMock()
    if side_effect is not None:
        client.messages.create.side_effect = side_effect
    else:
        client.messages.create.return_value = response
    return PlanGenerator(api_key="sk-ant-test", config=config or CONFIG, client=client), client


class PlanGeneratorTests(unittest.TestCase):
    def test_three_day_plan_end_to_end(self):
        payload = _payload()
        self.assertIn("exactly 3 training days", payload.text)
        generator, _ = _generator(_message(_three_day_plan_json()))

        plan = generator.generate_plan(payload)

        self.assertEqual(plan.day_numbers, [1, 2, 3])
        self.assertEqual(plan.exercises_for(1)[0].name, "Bench Press")

    def test_sends_model_settings_and_system_prompt(self):
        payload = _payload()
        generator, client = _generator(_message(_three_day_plan_json()))

        generator.generate_plan(payload)

        kwargs = client.messages.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "claude-test")
        self.assertEqual(kwargs["max_tokens"], 1500)
        self.assertEqual(kwargs["temperature"], 0.2)
        self.assertEqual(kwargs["system"], payload.system)
        self.assertEqual(kwargs["messages"], payload.to_messages())

    def test_prefill_adds_assistant_brace_and_reattaches_it(self):
        config = {"claude": {**CONFIG["claude"], "prefill_json": True}}
        continuation = _three_day_plan_json()[1:]
        generator, client = _generator(_message(continuation), config=config)

        plan = generator.generate_plan(_payload())

        messages = client.messages.create.call_args.kwargs["messages"]
        self.assertEqual(messages[-1], {"role": "assistant", "content": "{"})
        self.assertEqual(len(plan.days), 3)

    def test_prefill_does_not_double_a_restated_brace(self):
        config = {"claude": {**CONFIG["claude"], "prefill_json": True}}
        generator, _ = _generator(_message(_three_day_plan_json()), config=config)

        plan = generator.generate_plan(_payload())

        self.assertEqual(len(plan.days), 3)

    def test_non_json_reply_raises_parse_error(self):
        generator, _ = _generator(_message("Sorry, I can't help"))

        with self.assertRaises(ParseError) as ctx:
            generator.generate_plan(_payload())

        self.assertEqual(ctx.exception.raw_text, "Sorry, I can't help")

    def test_empty_day_for_single_day_plan(self):
        generator, _ = _generator(_message('{"days": {"1": []}}'))

        plan = generator.generate_plan(_payload(training_days=1))

        self.assertEqual(plan.day_numbers, [1])
        self.assertEqual(plan.exercises_for(1), [])

    def test_missing_content_is_parse_error(self):
        for response in [_message(None), _message(""), _message("   ")]:
            with self.subTest(response=response):
                generator, _ = _generator(response)
                with self.assertRaises(ParseError):
                    generator.generate_plan(_payload())

    def test_truncated_reply_mentions_token_limit(self):
        generator, _ = _generator(_message('{"days": {"1": [', stop_reason="max_tokens"))

        with self.assertRaises(ParseError) as ctx:
            generator.generate_plan(_payload())

        self.assertIn("token limit", str(ctx.exception))

    def test_day_outside_requested_range_raises_shape_error(self):
        body = json.dumps({"days": {"1": [_exercise("Squat")], "4": [_exercise("Lunge")]}})
        generator, _ = _generator(_message(body))

        with self.assertRaises(ShapeError) as ctx:
            generator.generate_plan(_payload(training_days=1))

        codes = [v["code"] for v in ctx.exception.violations]
        self.assertEqual(codes, ["day_out_of_range"])

    def test_connection_failure_raises_transport_error(self):
        error = anthropic.APIConnectionError(request=API_REQUEST)
        generator, _ = _generator(side_effect=error)

        with self.assertRaises(TransportError) as ctx:
            generator.generate_plan(_payload())

        self.assertIs(ctx.exception.__cause__, error)
        self.assertIsNone(ctx.exception.status_code)

    def test_status_error_keeps_status_code(self):
        response = httpx.Response(429, request=API_REQUEST, json={"error": {"message": "slow down"}})
        error = anthropic.RateLimitError("rate limited", response=response, body=None)
        generator, _ = _generator(side_effect=error)

        with self.assertRaises(TransportError) as ctx:
            generator.generate_plan(_payload())

        self.assertEqual(ctx.exception.status_code, 429)

    def test_all_failures_share_a_base_class(self):
        for error_type in [TransportError, ParseError, ShapeError]:
            self.assertTrue(issubclass(error_type, PlanGenerationError))

    def test_client_built_from_config(self):
        generator = PlanGenerator(api_key="sk-ant-test", config=CONFIG, timeout=30)

        self.assertIsInstance(generator.client, anthropic.Anthropic)
        self.assertEqual(generator.model, "claude-test")
        self.assertEqual(generator.client.max_retries, 1)

    def test_missing_model_raises_config_error(self):
        for config in [{}, {"claude": {"max_tokens": 1500}}, {"claude": None}]:
            with self.subTest(config=config):
                with self.assertRaises(ConfigError):
                    PlanGenerator(api_key="sk-ant-test", config=config, client=MagicMock())

    def test_explicit_model_overrides_missing_config(self):
        generator = PlanGenerator(api_key="sk-ant-test", config={}, model="claude-other", client=MagicMock())

        self.assertEqual(generator.model, "claude-other")


class ParsePlanResponseTests(unittest.TestCase):
    def test_round_trip_through_canonical_dict(self):
        plan = parse_plan_response(_three_day_plan_json(), training_days=3)

        again = parse_plan_response(json.dumps(plan.to_dict()), training_days=3)

        self.assertEqual(again, plan)
        self.assertEqual(plan.to_dict(), json.loads(_three_day_plan_json()))

    def test_strips_markdown_fences(self):
        text = "```json\n" + _three_day_plan_json() + "\n```"

        plan = parse_plan_response(text, training_days=3)

        self.assertEqual(len(plan.days), 3)

    def test_json_array_is_shape_error(self):
        with self.assertRaises(ShapeError) as ctx:
            parse_plan_response("[]", training_days=1)

        self.assertEqual(ctx.exception.violations[0]["code"], "not_an_object")

    def test_empty_object_is_shape_error(self):
        with self.assertRaises(ShapeError):
            parse_plan_response("{}", training_days=2)

    def test_legacy_main_workout_migrates_for_one_day(self):
        text = json.dumps({"mainWorkout": [_exercise("Deadlift")]})

        plan = parse_plan_response(text, training_days=1)

        self.assertEqual(plan.exercises_for(1)[0].name, "Deadlift")

    def test_legacy_main_workout_rejected_for_multiple_days(self):
        text = json.dumps({"mainWorkout": [_exercise("Deadlift")]})

        with self.assertRaises(ShapeError) as ctx:
            parse_plan_response(text, training_days=3)

        self.assertEqual(ctx.exception.violations[0]["code"], "legacy_main_workout")

    def test_shape_error_message_counts_extra_violations(self):
        text = json.dumps({"days": {"1": [{"name": "", "sets": 0, "reps": "", "instructions": 1}]}})

        with self.assertRaises(ShapeError) as ctx:
            parse_plan_response(text, training_days=1)

        self.assertIn("(+3 more)", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
