from flask_sqlalchemy import SQLAlchemy

# shared by every model in data_tables/ and bound to the app in create_app()
db = SQLAlchemy()
