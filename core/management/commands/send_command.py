from django.core.management.base import BaseCommand, CommandError

from core.services.remote_store import RemoteStoreClient


class Command(BaseCommand):
    help = "Envía un comando de dispositivo al mock store (name + status)"

    def add_arguments(self, parser):
        parser.add_argument("name", help="Nombre del dispositivo, ej: RobotA")
        parser.add_argument("status", help="Comando, ej: ADELANTE / DETENER")

    def handle(self, *args, **options):
        name = (options["name"] or "").strip()
        status = (options["status"] or "").strip()
        if not name or not status:
            raise CommandError("Por favor, complete todos los campos (name y status)")

        if not RemoteStoreClient().create_record(name, status):
            raise CommandError("Error al enviar el comando. Por favor, intente nuevamente.")

        self.stdout.write(self.style.SUCCESS(f"Comando enviado correctamente: {name} → {status}"))
