from flask import jsonify

from ..constants.service_code import HTTP_STATUS_CODES


def prepared_response(status, status_code, message, data=None, errors=None):
    """
    Envelope used by every endpoint. `status_code` is a key of HTTP_STATUS_CODES;
    `data` and `errors` only appear when set.
    """
    http_status = HTTP_STATUS_CODES[status_code]

    body = {"success": status, "status_code": http_status, "message": message}
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors

    return jsonify(body), http_status
