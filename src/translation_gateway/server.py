"""
HTTP Server

Flask application exposing the gateway operations under ``/api/github``.
Every route needs an ``Authorization`` header carrying the caller's GitHub
token; errors are returned as ``{"error": ..., "message": ...}``.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import quote, unquote

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from . import __version__
from .api import GatewaySession, TranslationGatewayAPI
from .config import AppConfig, get_config
from .errors import AuthorizationError, GatewayError, ValidationError
from .github.client import GitHubAPIError, GitHubTimeoutError
from .models.requests import (
    ApproveFileRequest,
    BranchQuery,
    ConflictQuery,
    MergeRequest,
    RepositoryQuery,
    UpdateTranslationsRequest,
)


logger = logging.getLogger(__name__)

github_routes = Blueprint('github', __name__, url_prefix='/api/github')

SKIPPED_FILES_HEADER = 'X-Skipped-Files'


def extract_token(header: Optional[str]) -> str:
    """
    Token from an ``Authorization`` header value.

    Accepts ``Bearer <token>``, ``token <token>`` or the bare token.
    """
    value = (header or '').strip()
    if not value:
        raise AuthorizationError("No token provided")

    scheme, _, credential = value.partition(' ')
    if credential.strip() and scheme.lower() in ('bearer', 'token'):
        return credential.strip()
    return value


def _gateway() -> TranslationGatewayAPI:
    return current_app.extensions['translation_gateway']


def _session() -> GatewaySession:
    return _gateway().session(extract_token(request.headers.get('Authorization')))


def _query(model):
    return model(**request.args.to_dict())


def _body(model):
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return model(**data)


def _error(error: str, message: str, status_code: int) -> Tuple:
    return jsonify({'error': error, 'message': message}), status_code


@github_routes.route('/changed', methods=['GET'])
def changed_files():
    """Changed files of the working pull request, with diffs and comments."""
    params = _query(BranchQuery)
    _gateway().check_branch(params.branch)
    result = _session().get_changed_files(params.repo, params.branch)
    return jsonify(result.to_dict())


@github_routes.route('/diff', methods=['GET'])
def detailed_diff():
    params = _query(BranchQuery)
    _gateway().check_branch(params.branch)
    files = _session().get_detailed_diff(params.repo, params.branch)
    return jsonify([changed.to_dict() for changed in files])


@github_routes.route('/compare', methods=['GET'])
def compare():
    params = _query(BranchQuery)
    _gateway().check_branch(params.branch)
    files = _session().get_diff(params.repo, params.branch)
    return jsonify([summary.to_dict() for summary in files])


@github_routes.route('/conflicts', methods=['GET'])
def conflicts():
    """
    Conflicts with the reference branch; 204 when there are none.

    Only ``.yml``/``.yaml`` files are checked. Files changed on both sides
    that were not checked are listed, URL-encoded and comma-separated, in
    the ``X-Skipped-Files`` header.
    """
    params = _query(ConflictQuery)
    _gateway().check_branch(params.branch)
    check = _session().check_conflicts(params.repo, params.branch, params.reference)

    headers = {}
    if check.skipped_files:
        headers[SKIPPED_FILES_HEADER] = ','.join(quote(name, safe='/') for name in check.skipped_files)

    if not check.files:
        return '', 204, headers
    return jsonify([file_conflicts.to_dict() for file_conflicts in check.files]), 200, headers


@github_routes.route('/update', methods=['PUT'])
def update_translations():
    body = _body(UpdateTranslationsRequest)
    _gateway().check_branch(body.branch)
    response = _session().update_file_with_translations(
        body.repo, body.translations, body.branch, body.filename
    )
    return jsonify(response)


@github_routes.route('/merge', methods=['PUT'])
def merge():
    body = _body(MergeRequest)
    _gateway().check_branch(body.branch)
    result = _session().merge_branch(body.repo, body.branch)
    return jsonify(result.to_dict())


@github_routes.route('/pr/<int:pr_number>/file/<path:file_path>/approved', methods=['GET'])
def file_approval(pr_number: int, file_path: str):
    params = _query(BranchQuery)
    status = _session().check_file_approval(params.repo, pr_number, file_path, params.branch)
    return jsonify(status.to_dict())


@github_routes.route('/pr/<int:pr_number>/file/<path:file_path>/approve', methods=['POST'])
def approve_file(pr_number: int, file_path: str):
    body = _body(ApproveFileRequest)
    comment = _session().approve_file(
        body.repo, pr_number, file_path, body.sha, body.lang, body.label_name
    )
    return jsonify({
        'success': True,
        'comment': comment,
        'message': f'File {unquote(file_path)} has been approved for label '
                   f'"{body.label_name}" in language "{body.lang}".',
    })


@github_routes.route('/reviewers', methods=['GET'])
def reviewers():
    params = _query(RepositoryQuery)
    return jsonify(_session().get_reviewers(params.repo))


def register_error_handlers(app: Flask) -> None:
    """Map gateway, GitHub and validation errors to JSON responses."""

    @app.errorhandler(GatewayError)
    def handle_gateway_error(e: GatewayError):
        logger.info(f"{e.status_code} {e.error}: {e.message}")
        return _error(e.error, e.message, e.status_code)

    @app.errorhandler(PydanticValidationError)
    def handle_validation_error(e: PydanticValidationError):
        details = '; '.join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in e.errors()
        )
        return _error("Bad Request", details, 400)

    @app.errorhandler(GitHubTimeoutError)
    def handle_timeout(e: GitHubTimeoutError):
        return _error("Gateway Timeout", str(e), 504)

    @app.errorhandler(GitHubAPIError)
    def handle_github_error(e: GitHubAPIError):
        if e.status_code is not None and 400 <= e.status_code < 500:
            logger.info(f"GitHub returned {e.status_code}: {e.api_message}")
            return _error("GitHub API Error", e.api_message, e.status_code)

        logger.error(f"GitHub API failure: {e}")
        return _error("GitHub API Error", e.api_message, 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return _error(e.name, e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        return _error("Internal Server Error", "An unexpected error occurred", 500)


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Optional configuration object (defaults to the active configuration)
    """
    config = config or get_config()

    app = Flask(__name__)
    CORS(app, origins=config.server.cors_origins, expose_headers=[SKIPPED_FILES_HEADER])
    app.extensions['translation_gateway'] = TranslationGatewayAPI(config)

    app.register_blueprint(github_routes)
    register_error_handlers(app)

    @app.route('/api/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'translation-gateway',
            'version': __version__,
        })

    return app
