import logging
import os

from flask import Flask, jsonify

from config import Config
from database import db
from data_tables.answer import Answer
from data_tables.answer_history import AnswerHistory
from data_tables.question import Question
from data_tables.section import Section
from routes.answers import answers_bp
from routes.auth import auth_bp
from routes.export import export_bp
from routes.outline import outline_bp
from services import outline_store
from services.errors import OutlineError


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # connect database to app
    db.init_app(app)
    outline_store.init_app(app)

    # register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(outline_bp)
    app.register_blueprint(answers_bp)
    app.register_blueprint(export_bp)

    @app.errorhandler(OutlineError)
    def handle_outline_error(error):
        if error.status_code >= 500:
            app.logger.error('%s: %s', error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    # home route
    @app.route('/')
    def home():
        return """
        <h1>AEP Blueprint</h1>
        <p>System is running!</p>
        <a href='/api/sections'>Sections</a> |
        <a href='/export/markdown'>Export Markdown</a> |
        <a href='/export/pdf'>Export PDF</a>
        """

    # create the folders and tables the app needs when it starts
    if not app.config.get('TESTING'):
        database_folder = os.path.dirname(app.config['DATABASE_PATH'])
        for folder in [database_folder, app.config['UPLOAD_FOLDER']]:
            if not os.path.exists(folder):
                os.makedirs(folder)

    with app.app_context():
        db.create_all()
        app.logger.info('database tables ready')

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, port=5001, use_reloader=False)
