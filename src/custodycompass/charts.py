# src/custodycompass/charts.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def create_pie_chart(values: list[int], labels: list[str], filename: str, colors: list[str] = None, subtitle: str = None):
    """
    Erstellt ein Tortendiagramm und speichert es als PNG.
    :param values: Liste der Werte (z.B. [Tage A, Tage B]).
    :param labels: Zugehörige Labels.
    :param filename: Pfad zur Ausgabedatei, z.B. "custody_share.png".
    :param colors: (Optional) Liste von Farben für die Segmente.
    :param subtitle: (Optional) Text, der unter das Diagramm geschrieben wird.
    """
    fig, ax = plt.subplots()
    if sum(values) == 0:
        # Platzhalter-Bild, wenn keine Daten da sind
        ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14)
        ax.axis("off")
    else:
        ax.pie(values, labels=labels, autopct="%1.1f%%", colors=colors)
        ax.axis("equal")
    if subtitle:
        fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=16, fontweight='bold')
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)
