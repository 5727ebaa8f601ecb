# Importa todos los modelos para que SQLAlchemy los registre antes de create_all
from fantaf1.db.models.user import User
from fantaf1.db.models.season import Season
from fantaf1.db.models.driver import Driver
from fantaf1.db.models.event import Event
from fantaf1.db.models.prediction import Prediction
