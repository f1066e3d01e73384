from __future__ import annotations

import logging
import random
from pathlib import Path
import sys
from typing import Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from core.formulas import reference_formulas
from core.rods import OutOfRangeError
from generators.challenge_generator import ChallengeGenerator
from schemas.abacus import (
    AnswerRequest,
    BeadMoveRequest,
    ChallengeRequest,
    ChallengeSampleRequest,
    FormulaPayload,
    ModeRequest,
    MoveOutcomePayload,
    RodPayload,
    ValidationPayload,
)
from tools.generate_challenges_tool import run_generate_challenges
from trainer.config import TrainerConfig
from trainer.session import AbacusSession
from trainer.stats_store import TrainerStore

logger = logging.getLogger(__name__)


def build_session(config: TrainerConfig) -> AbacusSession:
    generator = ChallengeGenerator(
        config.rod_count,
        rng=random.Random(config.seed),
        difficulty=config.difficulty,
    )
    return AbacusSession(
        rod_count=config.rod_count,
        store=TrainerStore(config.data_file),
        generator=generator,
    )


def create_app(session: Optional[AbacusSession] = None, config: Optional[TrainerConfig] = None) -> Flask:
    if session is None:
        session = build_session(config or TrainerConfig.from_env())
    app = Flask(__name__)
    app.config["ABACUS_SESSION"] = session

    @app.errorhandler(OutOfRangeError)
    def bead_out_of_range(exc: OutOfRangeError):
        return jsonify({"error": str(exc), "bead": exc.bead, "maximum": exc.maximum}), 400

    @app.errorhandler(ValueError)
    def bad_value(exc: ValueError):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(ValidationError)
    def bad_payload(exc: ValidationError):
        return jsonify({"error": "Invalid request body.", "details": exc.errors(include_url=False, include_context=False)}), 400

    @app.route("/api/state", methods=["GET"])
    def state():
        return jsonify(session.snapshot().model_dump(mode="json"))

    @app.route("/api/rods/<int:rod_id>", methods=["POST"])
    def move_beads(rod_id: int):
        if rod_id >= session.rod_count:
            return jsonify({"error": f"Rod {rod_id} is not on this {session.rod_count}-rod board."}), 404
        move = BeadMoveRequest(**_json_body())
        outcome = session.move_beads(rod_id, move.heaven, move.earth)
        payload = MoveOutcomePayload(
            rod=RodPayload.from_rod(outcome.rod),
            total=outcome.total,
            formula=FormulaPayload.from_formula(outcome.formula) if outcome.formula else None,
            validation=ValidationPayload.from_result(outcome.validation) if outcome.validation else None,
            announcement=outcome.announcement,
        )
        return jsonify(payload.model_dump(mode="json"))

    @app.route("/api/reset", methods=["POST"])
    def reset():
        announcement = session.reset()
        return jsonify({"announcement": announcement, "state": session.snapshot().model_dump(mode="json")})

    @app.route("/api/challenge", methods=["POST"])
    def start_challenge():
        body = ChallengeRequest(**_json_body())
        session.start_challenge(body.type)
        return jsonify(session.snapshot().model_dump(mode="json"))

    @app.route("/api/mode", methods=["POST"])
    def set_mode():
        body = ModeRequest(**_json_body())
        session.set_mode(body.mode)
        return jsonify({"mode": session.mode.value})

    @app.route("/api/settings/<key>/toggle", methods=["POST"])
    def toggle_setting(key: str):
        settings = session.toggle_setting(key)
        return jsonify(settings.model_dump())

    @app.route("/api/answer", methods=["POST"])
    def submit_answer():
        body = AnswerRequest(**_json_body())
        result = session.submit_answer(body.response)
        return jsonify(ValidationPayload.from_result(result).model_dump(mode="json"))

    @app.route("/api/stats", methods=["DELETE"])
    def clear_stats():
        return jsonify(session.clear_stats().model_dump())

    @app.route("/api/formulas", methods=["GET"])
    def formulas():
        return jsonify(
            {
                family: [FormulaPayload.from_formula(formula).model_dump() for formula in entries]
                for family, entries in reference_formulas().items()
            }
        )

    @app.route("/api/challenges/sample", methods=["GET"])
    def sample_challenges():
        query = ChallengeSampleRequest(**request.args.to_dict())
        return jsonify(
            run_generate_challenges(
                query.type,
                count=query.count,
                rod_count=session.rod_count,
                difficulty=query.difficulty,
                seed=query.seed,
            )
        )

    return app


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


if __name__ == "__main__":
    config = TrainerConfig.from_env()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving a %d-rod frame, data in %s", config.rod_count, config.data_file)
    create_app(config=config).run(debug=True, port=5000)
