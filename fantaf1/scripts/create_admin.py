import sys

from fantaf1.db.session import SessionLocal, engine, Base
from fantaf1.db.models import _all
from fantaf1.db.models.user import User
from fantaf1.core.security import create_access_token


def create_admin_user(email: str = "admin@example.com", username: str = "admin"):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        user = (
            db.query(User)
            .filter(
                (User.email == email) | (User.username == username)
            )
            .first()
        )

        if user:
            print("⚠️  Ya existe un usuario con ese email o username")
            if user.role != "admin":
                user.role = "admin"
                db.commit()
                print("➡️  Promovido a admin")
        else:
            user = User(email=email, username=username, role="admin")
            db.add(user)
            db.commit()
            db.refresh(user)
            print("✅ Usuario administrador creado correctamente")

        print("➡️  Email:", user.email)
        print("➡️  Usuario:", user.username)
        print("➡️  Token:", create_access_token({"sub": str(user.id), "role": user.role}))

    except Exception:
        db.rollback()
        print("❌ Error creando el usuario administrador")
        raise

    finally:
        db.close()


if __name__ == "__main__":
    create_admin_user(*sys.argv[1:3])
