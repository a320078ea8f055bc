from flask import render_template, request, jsonify

MESSAGES = {
    400: "Solicitud no válida",
    403: "Acceso denegado 🚫",
    404: "Página no encontrada 😕",
    500: "Algo salió mal de nuestro lado 😓",
}

def _wants_json():
    return request.path.startswith("/assistant") or request.is_json

def _render(code):
    if _wants_json():
        return jsonify({"error": MESSAGES[code]}), code
    return render_template('errors/error.html', code=code, message=MESSAGES[code]), code

def register_error_handlers(app):
    @app.errorhandler(400)
    def bad_request(e):
        return _render(400)
    @app.errorhandler(404)
    def not_found(e):
        return _render(404)
    @app.errorhandler(500)
    def server_error(e):
        return _render(500)
    @app.errorhandler(403)
    def forbidden(e):
        return _render(403)
