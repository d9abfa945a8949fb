"""
Audit routes — cached report, manual rescan, settings, health check.
"""
import logging

from flask import Blueprint, request, jsonify

from spam_auditor.errors import ScanInProgressError
from spam_auditor.services import audit
from spam_auditor.services.report_cache import get_report_cache
from spam_auditor.services.settings_store import load_settings, save_settings

logger = logging.getLogger('routes.audit')

bp = Blueprint('audit', __name__)

EMPTY_REPORT = {'scanned_at': None, 'rows': []}


@bp.route('/health')
def health_check():
    return jsonify({'status': 'healthy'})


@bp.route('/api/report')
def get_report():
    """Last cached scan report."""
    report = get_report_cache().get()
    if report is None:
        return jsonify(EMPTY_REPORT)
    return jsonify(report.to_dict())


@bp.route('/api/scan', methods=['POST'])
def rescan():
    """
    Run a scan now.

    Runs inline and returns the new report; with ?async=1 the scan is queued on
    the RQ worker and the job id comes back with a 202.
    """
    if request.args.get('async', type=int):
        try:
            job = audit.enqueue_scan()
        except Exception as e:
            logger.error("Failed to enqueue scan", exc_info=True)
            return jsonify({'error': str(e)}), 500
        return jsonify({'job_id': job.id, 'status': 'queued'}), 202

    try:
        report = audit.run_scan_and_store()
    except ScanInProgressError as e:
        return jsonify({'error': str(e)}), 409
    return jsonify(report.to_dict())


@bp.route('/api/settings')
def get_settings():
    return jsonify(load_settings().to_dict())


@bp.route('/api/settings', methods=['POST'])
def update_settings():
    """
    Save settings. Keys left out keep their current value; out-of-range values
    are clamped, not rejected.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400

    merged = load_settings().to_dict()
    merged.update(data)
    try:
        settings = save_settings(merged)
    except Exception as e:
        return jsonify({'error': str(e)}), 500
    return jsonify(settings.to_dict())
