"""Package installation for the PostgreSQL engine."""

from typing import List, Tuple

from pgprovisioner.constants import DEFAULT_PACKAGE_NAME


class PackageInstaller:
    """Installs the engine through ``sudo apt``."""

    def __init__(self, command_runner, logger, console, package_name: str = DEFAULT_PACKAGE_NAME):
        self.command_runner = command_runner
        self.logger = logger
        self.console = console
        self.package_name = package_name

    def refresh_command(self) -> List[str]:
        return ["sudo", "apt", "update"]

    def install_command(self) -> List[str]:
        return ["sudo", "apt", "install", "-y", self.package_name]

    def install(self) -> Tuple[Tuple[str, ...], ...]:
        """Refresh the package index then install the package; both must succeed."""
        self.console.print("[blue]Updating package index...[/blue]")
        self.logger.info("Updating package index...")
        refresh = self.refresh_command()
        self.command_runner.run(refresh)

        self.console.print(f"[blue]Installing {self.package_name}...[/blue]")
        self.logger.info("Installing %s...", self.package_name)
        install = self.install_command()
        self.command_runner.run(install)

        self.console.print(f"[green]{self.package_name} installed.[/green]")
        return (tuple(refresh), tuple(install))
