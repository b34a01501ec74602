"""
Prompt Templates - Centralized prompt management
"""

from langchain_core.prompts import ChatPromptTemplate

from models.ai_models import ScanMode

JSON_ONLY = "Gib die Antwort als einzelnes JSON-Objekt zurück. Gib keinen Markdown oder zusätzlichen Text aus."

RECIPE_FORMAT = """Das JSON-Objekt hat genau diese Felder:
{
  "recipeName": "Name des Gerichts",
  "description": "Kurze Beschreibung",
  "ingredients": ["500g Nudeln", "2 Dosen Tomaten"],
  "instructions": ["Schritt 1", "Schritt 2"],
  "nutrition": {"calories": "650 kcal", "protein": "25 g", "carbs": "80 g", "fat": "20 g"}
}
Jede Zutat ist eine Zeile mit Menge und Einheit vorne. Die Mengen gelten für die angegebene Anzahl Portionen. Die Nährwerte gelten pro Portion."""

SCAN_FORMAT = """Das JSON-Objekt hat genau diese Felder:
{
  "isReadable": true,
  "unreadableReason": "nur wenn isReadable false ist",
  "recipeName": "Name des Rezepts, falls vorhanden",
  "ingredients": ["Zutat 1", "Zutat 2"],
  "instructions": ["Schritt 1"]
}"""


class ChefPrompts:
    """
    All prompt templates used by the chef gateway
    """

    @staticmethod
    def get_generate_prompt() -> ChatPromptTemplate:
        """
        Recipe generation from a dish prompt, difficulty, servings and wishes
        """
        return ChatPromptTemplate.from_messages([
            ("system", """Handele als Profi-Koch. Erstelle ein hochqualitatives, deutsches Gourmet-Rezept mit präzisen Mengenangaben und Nährwertschätzung.

{format_instructions}

{json_only}"""),
            ("human", (
                'Gericht: "{prompt}"\n'
                'Schwierigkeitsgrad: "{difficulty}"\n'
                'Anzahl Portionen: {servings}\n'
                'Zusätzliche Wünsche: "{wishes}"'
            ))
        ])

    @staticmethod
    def get_scan_system_prompt(mode: ScanMode) -> str:
        """
        System instruction for image analysis in the given mode
        """
        if mode == ScanMode.RECIPE:
            instructions = """Analysiere das folgende Bild eines Rezepts. Das Bild enthält wahrscheinlich handschriftlichen Text in Schreibschrift oder Druckbuchstaben und ist eventuell schlecht beleuchtet oder verschwommen.

Spezialanweisungen für Handschrift:
- Gib dein Bestes, um auch unklare Handschriften zu entziffern.
- Wenn ein Wort mehrdeutig ist, erschließe es aus dem Kontext des Rezepts.

Allgemeine Anweisungen:
1. Ist der Text völlig unleserlich, setze isReadable auf false und gib in unreadableReason eine kurze Begründung an (z.B. 'handschriftlich unleserlich', 'stark verschwommen').
2. Kann das Rezept zumindest teilweise entziffert werden, setze isReadable auf true und extrahiere Rezeptnamen, Zutaten und Anleitung so gut wie möglich.
3. Lasse Felder leer, wenn die Informationen nicht auf dem Bild vorhanden sind."""
        else:
            instructions = """Du bist ein Vision-Experte für Lebensmittel. Prüfe das Bild zuerst auf Qualität.

Fehler-Kategorien:
- Ist das Bild extrem unscharf oder zeigt keine Lebensmittel: isReadable=false, unreadableReason='Bild nicht lesbar'.
- Ist es zu dunkel oder überbelichtet: isReadable=false, unreadableReason='Lichtverhältnisse schlecht'.
- Sind keine Lebensmittel oder Zutaten zu finden: isReadable=false, unreadableReason='Zutaten nicht erkannt'.

Erfolg:
- Werden Lebensmittel gefunden, setze isReadable=true und liste ALLE gefundenen Zutaten in ingredients auf."""

        return f"{instructions}\n\n{SCAN_FORMAT}\n\n{JSON_ONLY}"

    @staticmethod
    def get_scan_question(mode: ScanMode) -> str:
        if mode == ScanMode.RECIPE:
            return "Lies das Rezept auf diesem Bild."
        return "Welche Lebensmittel sind auf diesem Bild zu sehen? Liste sie auf."
