from app.models.health_declaration import HealthDeclaration, DeclarationStatus

__all__ = ["HealthDeclaration", "DeclarationStatus"]
