# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── albergues/       <- Paquete Python
#       ├── main.py      <- create_app()
#       ├── services/
#       └── repositories/
#
# CLI de Flask (datos de referencia):
#   flask --app wsgi cargar-catalogo catalogo.json
# ==============================================================================

from albergues import config
from albergues.main import configure_logging, create_app

configure_logging(config.DEBUG)

# Variable 'app' exportada para Gunicorn. El contenedor de dependencias se
# crea aquí una vez por proceso y se cierra al salir (atexit).
app = create_app()

if __name__ == '__main__':
    app.run(debug=config.DEBUG, host=config.HOST, port=config.PORT)
