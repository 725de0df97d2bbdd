import structlog
from flask import Flask, current_app, jsonify, render_template, request
from flask_cors import CORS
from werkzeug.exceptions import InternalServerError

from keygen_app.config import Settings
from keygen_app.crypto_utils import hash_key, secrets_match
from keygen_app.issuance import IssuanceStatus, KeyIssuer
from keygen_app.ledger import IssuanceLedger, InMemoryLedger
from keygen_app.linkvertise import LinkvertiseClient
from keygen_app.logging_config import configure_logging

log = structlog.get_logger(__name__)


def create_app(settings=None, ledger: IssuanceLedger = None, verifier=None) -> Flask:
    """Build the Flask app.

    ``ledger`` and ``verifier`` (a callable taking a completion hash and
    returning bool) default to an in-memory ledger and the Linkvertise
    client built from ``settings``.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.environment)

    # ---------------- FLASK SETUP ----------------
    app = Flask(__name__)
    CORS(app)

    if ledger is None:
        ledger = InMemoryLedger()
    if verifier is None:
        verifier = LinkvertiseClient(
            token=settings.verification_token,
            api_url=settings.linkvertise_api_url,
            timeout=settings.verify_timeout,
        ).verify

    app.extensions["keygen.settings"] = settings
    app.extensions["keygen.ledger"] = ledger
    app.extensions["keygen.issuer"] = KeyIssuer(
        ledger=ledger,
        verify=verifier,
        salt=settings.key_salt,
        key_bytes=settings.key_bytes,
    )

    for name in settings.insecure_defaults():
        log.warning("insecure_default_setting", setting=name)

    register_routes(app)
    return app


def _settings() -> Settings:
    return current_app.extensions["keygen.settings"]


def _ledger() -> IssuanceLedger:
    return current_app.extensions["keygen.ledger"]


def _issuer() -> KeyIssuer:
    return current_app.extensions["keygen.issuer"]


def register_routes(app: Flask) -> None:

    # ---------------- HOME ----------------
    @app.route("/")
    def home():
        callback_url = request.host_url + "linkvertise/complete?hash=XYZ"
        return render_template("index.html", callback_url=callback_url)

    # ---------------- LINKVERTISE CALLBACK ----------------
    @app.route("/linkvertise/complete")
    def linkvertise_complete():
        outcome = _issuer().issue(request.args.get("hash"))

        if outcome.status is IssuanceStatus.INVALID_INPUT:
            return "Missing hash.", 400
        if outcome.status is IssuanceStatus.ALREADY_ISSUED:
            return render_template("key_used.html")
        if outcome.status is IssuanceStatus.REJECTED:
            return render_template("verify_failed.html"), 400

        return render_template("key_issued.html", key=outcome.credential)

    # ---------------- ADMIN ----------------
    @app.route("/admin")
    def admin():
        provided = request.args.get("key", "")
        if not secrets_match(provided, _settings().admin_key):
            log.warning("admin_forbidden", remote_addr=request.remote_addr)
            return "Forbidden.", 403

        return jsonify([
            {
                "hash": completion_hash,
                "created": record.created_iso(),
                "keyHash": record.key_digest,
            }
            for completion_hash, record in _ledger().items()
        ])

    # ---------------- KEY CHECK ----------------
    @app.route("/keys/check")
    def check_key():
        key = request.args.get("key", "").strip().upper()
        if not key:
            return jsonify({"valid": False, "reason": "missing key"}), 400

        found = _ledger().find_by_digest(hash_key(key, _settings().key_salt))
        if found is None:
            return jsonify({"valid": False})

        _, record = found
        return jsonify({"valid": True, "created": record.created_iso()})

    # ---------------- ERRORS ----------------
    @app.errorhandler(InternalServerError)
    def internal_error(e):
        original = getattr(e, "original_exception", None) or e
        log.error("unhandled_error", path=request.path, exc_info=original)
        return "Internal Server Error.", 500


if __name__ == "__main__":
    settings = Settings.from_env()
    create_app(settings).run(port=settings.port, debug=False)
