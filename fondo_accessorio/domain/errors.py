# fondo_accessorio/domain/errors.py

from __future__ import annotations


class FondoError(Exception):
    """Базовий клас для всіх помилок розрахунку fondo salario accessorio."""


class FondoConfigError(FondoError):
    """
    Помилка конфігурації: розрахунок не можна запускати взагалі.

    На відміну від compliance-перевірок (це лише діагностика),
    така помилка означає, що результат був би частковим або хибним.
    """


class NormativaNonDisponibileError(FondoConfigError):
    """
    Dati normativi (riferimenti, valori pro capite, limiti) недоступні:
    - файл normativa.yml відсутній;
    - YAML не парситься;
    - бракує обов'язкових секцій.
    """


class ScenarioError(FondoError):
    """Некоректний YAML-сценарій з вхідними даними фонду."""


class FundCalculationError(FondoError):
    """Неочікувана помилка під час розрахунку (обгортка над оригінальним винятком)."""
