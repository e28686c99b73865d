from oceancollect.database import get_db, init_db, create_schema
from oceancollect.models_db import User, Profile, UserRole
from oceancollect.repositories import UnitOfWork
from werkzeug.security import generate_password_hash
import sys


def create_admin(email, password, first_name="Admin", last_name="OceanCollect"):
    """
    Cria (ou promove) um usuário Super Admin.
    """
    email = email.strip().lower()

    with UnitOfWork(next(get_db())) as uow:
        existing = uow.users.get_by_email(email)
        if existing:
            print(f"Utilisateur {email} existe déjà.")
            if existing.profile is None:
                existing.profile = Profile(first_name=first_name, last_name=last_name, role=UserRole.SUPER_ADMIN)
            elif existing.profile.role != UserRole.SUPER_ADMIN:
                print("Promotion en Super Admin...")
                existing.profile.role = UserRole.SUPER_ADMIN
            uow.commit()
            return

        print(f"Création du Super Admin: {email}...")
        user = User(
            email=email,
            password_hash=generate_password_hash(password),
            is_active=True,
        )
        user.profile = Profile(first_name=first_name, last_name=last_name, role=UserRole.SUPER_ADMIN)
        uow.users.add(user)
        uow.commit()
        print(f"Super Admin créé avec succès ! Login: {email}")


if __name__ == "__main__":
    init_db()
    create_schema()
    if len(sys.argv) < 3:
        print("Usage: python scripts/create_admin.py <email> <mot_de_passe> [prénom] [nom]")
        email = input("E-mail de l'admin: ")
        password = input("Mot de passe: ")
        create_admin(email, password)
    else:
        create_admin(*sys.argv[1:5])
