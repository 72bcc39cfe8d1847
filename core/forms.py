# core/forms.py
from django import forms

STATUS_CHOICES = [
    ("", "Seleccione un comando"),
    ("ADELANTE", "Adelante"),
    ("ATRAS", "Atrás"),
    ("DETENER", "Detener"),
    ("GIRO DERECHA", "Giro derecha"),
    ("GIRO IZQUIERDA", "Giro izquierda"),
]


class CommandForm(forms.Form):
    # texto libre en el store; el select es solo ayuda de UI
    name = forms.CharField(
        label="Nombre del dispositivo",
        max_length=100,
        strip=True,
        error_messages={"required": "Por favor, complete todos los campos"},
    )
    status = forms.CharField(
        label="Comando",
        max_length=50,
        strip=True,
        widget=forms.Select(choices=STATUS_CHOICES),
        error_messages={"required": "Por favor, complete todos los campos"},
    )
