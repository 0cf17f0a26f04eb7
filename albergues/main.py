import atexit
import json
import logging
from functools import wraps
from typing import Optional

import click
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from albergues import config
from albergues.app_container import AppContainer
from albergues.config import Settings, load_settings
from albergues.performance_logger import (
    configure as configure_profiling,
    init_profiling,
    write_function_stats_report,
)
from albergues.services import RegistroError, UnexpectedError

logger = logging.getLogger('albergues.api')

# ═══════════════════════════════════════════════════════════════════════════
# MENSAJES PARA EL USUARIO (errores 500)
# ═══════════════════════════════════════════════════════════════════════════
MSG_REGISTRO = "¡Ups! Algo salió mal al intentar registrarte. Por favor, inténtalo nuevamente más tarde."
MSG_LISTAR = "¡Ups! Algo salió mal al intentar obtener los ciudadanos. Por favor, inténtalo nuevamente más tarde."
MSG_TOTAL = "¡Ups! Algo salió mal al intentar obtener el total de ciudadanos. Por favor, inténtalo nuevamente más tarde."
MSG_ACTUALIZAR = "¡Ups! Algo salió mal al intentar actualizar el ciudadano. Por favor, inténtalo nuevamente más tarde."
MSG_ELIMINAR = "¡Ups! Algo salió mal al intentar eliminar el ciudadano. Por favor, inténtalo nuevamente más tarde."


def configure_logging(debug: bool = False) -> None:
    """Formato común de logs si nadie configuró logging antes."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


def api_errors(message: str):
    """
    Traduce excepciones a respuestas JSON.

    - RegistroError con status 4xx → {success: False, error}
    - Cualquier otra → 500 {success: False, message, error}
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except RegistroError as exc:
                if exc.status_code < 500:
                    return {"success": False, "error": exc.message}, exc.status_code
                logger.exception("Error en %s", request.path)
                return {"success": False, "message": message, "error": exc.message}, 500
            except Exception as exc:
                error = UnexpectedError(exc)
                logger.exception("Error inesperado en %s", request.path)
                return {"success": False, "message": message, "error": error.message}, 500
        return wrapper
    return decorator


def _json_body():
    """Cuerpo JSON de la petición; None si no es JSON válido."""
    return request.get_json(silent=True)


def create_app(container: Optional[AppContainer] = None, settings: Optional[Settings] = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        container: Contenedor ya construido (si no, se crea uno y se
            cierra al terminar el proceso)
        settings: Configuración usada cuando no se pasa contenedor
    """
    owns_container = container is None
    if container is None:
        container = AppContainer(settings or load_settings())
    settings = container.settings

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.json.ensure_ascii = False
    app.extensions['albergues'] = container

    if settings.uses_default_secret:
        logger.warning("ALBERGUES_SECRET_KEY no definida; usando la clave de desarrollo")

    # ═══════════════════════════════════════════════════════════════════════
    # PROFILING - Logs de rendimiento en /logs/
    # ═══════════════════════════════════════════════════════════════════════
    # Rutas: por app. @profile_function: global, lo fija solo la app dueña del proceso
    app.config["ENABLE_PROFILING"] = settings.enable_profiling
    init_profiling(app)

    if owns_container:
        configure_profiling(enabled=settings.enable_profiling)
        atexit.register(container.close)
        atexit.register(write_function_stats_report)

    @app.errorhandler(HTTPException)
    def _http_error(exc):
        """404/405/etc. también responden JSON."""
        return {"success": False, "error": exc.description}, exc.code

    # ═══════════════════════════════════════════════════════════════════════
    # CIUDADANOS
    # ═══════════════════════════════════════════════════════════════════════

    @app.route("/ciudadanos", methods=["POST"])
    @api_errors(MSG_REGISTRO)
    def create_ciudadano():
        """Registra un ciudadano y distribuye sus medicamentos."""
        result = container.registration_service.register(_json_body())
        return {"success": True, "ciudadano": result.ciudadano.to_dict()}, 201

    @app.route("/ciudadanos", methods=["GET"])
    @api_errors(MSG_LISTAR)
    def get_ciudadanos_de_todos_los_albergues():
        return jsonify(container.citizen_service.list_all())

    @app.route("/ciudadanos/total", methods=["GET"])
    @api_errors(MSG_TOTAL)
    def get_total_ciudadanos():
        return {"success": True, "totalCiudadanos": container.citizen_service.count()}

    @app.route("/ciudadanos/<albergue_id>", methods=["GET"])
    @api_errors(MSG_LISTAR)
    def get_ciudadanos(albergue_id):
        return jsonify(container.citizen_service.list_by_shelter(albergue_id))

    @app.route("/ciudadanos/<ciudadano_id>", methods=["PUT"])
    @api_errors(MSG_ACTUALIZAR)
    def update_ciudadano(ciudadano_id):
        ciudadano = container.citizen_service.update(ciudadano_id, _json_body())
        return {"success": True, "ciudadano": ciudadano.to_dict()}

    @app.route("/ciudadanos/<ciudadano_id>", methods=["DELETE"])
    @api_errors(MSG_ELIMINAR)
    def delete_ciudadano(ciudadano_id):
        container.citizen_service.delete(ciudadano_id)
        return {"success": True}

    # ═══════════════════════════════════════════════════════════════════════
    # CLI - Datos de referencia
    # ═══════════════════════════════════════════════════════════════════════

    @app.cli.command("cargar-catalogo")
    @click.argument("archivo", type=click.File("r", encoding="utf-8"))
    def cargar_catalogo(archivo):
        """Carga domicilios, medicamentos, enfermedades y bodegas desde ARCHIVO."""
        try:
            data = json.load(archivo)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"JSON inválido: {exc}") from exc
        try:
            creados = container.catalog_service.load_catalog(data)
        except RegistroError as exc:
            raise click.ClickException(exc.message) from exc
        for seccion, cantidad in creados.items():
            click.echo(f"{seccion}: {cantidad} nuevos")

    return app


if __name__ == "__main__":
    # Desarrollo local; en producción usar WSGI (gunicorn wsgi:app)
    configure_logging(config.DEBUG)
    application = create_app()
    if not config.DEBUG:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{config.HOST}:{config.PORT}")
        print(f"{'='*50}\n")
    application.run(debug=config.DEBUG, host=config.HOST, port=config.PORT)
