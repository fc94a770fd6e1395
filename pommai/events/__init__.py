"""Event models and the fan-out bus that carries them."""
