"""
Allow running the package directly: python -m mandelbrot_explorer
"""
from .app import run

if __name__ == "__main__":
    run()
