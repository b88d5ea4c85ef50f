from django.apps import AppConfig


class PayrollConfig(AppConfig):
    name = "payroll"
    verbose_name = "Clinic payroll"

    def ready(self):
        """Register the hour-accounting strategies when app is ready"""
        from payroll.services.factory import register_default_strategies

        register_default_strategies()
