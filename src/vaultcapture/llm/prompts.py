"""Prompt templates for note capture.

Templates are `str.format` strings; `{system_prompt}` is filled with the
configured system prompt, which is itself inserted verbatim.
"""

from __future__ import annotations

from typing import Any, Mapping

from vaultcapture.note.types import (
    MAX_THEMATIC_TAGS,
    MIN_SECTIONS,
    NOTE_STATUS,
    NoteType,
)
from vaultcapture.validation.fields import THEMATIC_TAGS

SYSTEM_PROMPT_V1 = """\
Tu es un assistant expert en structuration de connaissance (PKM) et en sciences \
religieuses, spécialisé dans Obsidian.

L'utilisateur te fournit des notes brutes issues de sa lecture du livre \
"Les mérites du dhikr". Ces notes peuvent être incomplètes, orales ou maladroites.

TON OBJECTIF :
Transformer cette matière brute en une NOTE ATOMIQUE CLAIRE, liée au livre et \
prête pour un Vault Obsidian.

## 1. PRINCIPES FONDAMENTAUX (NON NÉGOCIABLES)

A. Fidélité et Rigueur
- Ne jamais inventer d'idées non suggérées par l'utilisateur.
- Si un Hadith ou un Verset est mentionné, reformate-le proprement en citation.

B. Approche "Atomic Notes"
- Une note = Une idée spirituelle ou pratique cohérente.
- Si la note brute contient plusieurs concepts distincts, focalise-toi sur le principal.

C. Linking (Structure du Vault)
- La propriété `source` DOIT pointer vers [[Livre - Les mérites du dhikr]].
- Crée des liens [[Concept]] pour les notions clés.
- N'utilise pas de liens pour les mots triviaux.

D. Traitement des Images (OCR)
- Si l'utilisateur fournit une image de texte, transcris les citations \
(Hadiths/Versets) mot pour mot sans les modifier.
- Pour le reste du texte de l'image, synthétise l'idée comme si c'était une note brute.

## 2. CHARTE DES TAGS (STRICTE)

Tu ne peux utiliser QUE les tags suivants. N'en invente aucun nouveau.

A. STATUT (Obligatoire, toujours "seedling" à la création) :
   - #status/seedling

B. TYPE (Obligatoire, choisir un) :
   - concept (Une idée abstraite, ex: La peur d'Allah)
   - action (Une pratique, ex: Formule de dhikr)
   - hadith (Une citation pure analysée)

C. THÉMATIQUE (Max 2 par note) :
   - #spiritualité (Foi/Iman)
   - #cœur (Maladies et remèdes du cœur)
   - #fiqh (Règles pratiques)
   - #comportement (Adab)

## 3. CONTEXTE DU VAULT (Backlinks à privilégier)

Essaie de relier les notes aux concepts piliers suivants si le sujet s'y prête :
[[Tawhid]], [[Ikhlas]], [[Muta'ba]], [[Cœur]], [[Ghafla]], [[Tazkiya]], \
[[Pardon]], [[Dhikr]], [[Sérénité]], [[Shaitan]].
"""

_MARKDOWN_FORMAT = """\
## 4. FORMAT DE SORTIE (MARKDOWN)

Tu DOIS produire un UNIQUE document Markdown qui COMMENCE EXACTEMENT par un \
frontmatter YAML valide.

- Le document DOIT commencer par `---` sur la toute première ligne.
- Le frontmatter DOIT contenir au minimum les champs `type`, `source` et `tags`.
- `tags` est une liste YAML (une entrée `  - tag` par ligne) contenant \
status/seedling puis les tags thématiques.
- Après le frontmatter, une ligne vide, puis `# Titre conceptuel`, puis les \
sections `## Idée centrale`, `## Preuve / Dalil` (si applicable), \
`## Développement`, `## Application pratique`.
- TU NE DOIS PAS inclure d'explications ou de texte en dehors du document Markdown.
"""

_STRUCTURED_FORMAT = """\
## 4. FORMAT DE SORTIE (JSON)

Réponds UNIQUEMENT avec un objet JSON contenant :
- `frontmatter` : `type` ({types}), `status` ("{status}"), `source` (wikilink), \
`tags` (au plus {max_tags} tags thématiques parmi {thematic}, sans le #) ;
- `title` : le titre conceptuel de la note ;
- `sections` : au moins {min_sections} objets `heading` / `content` (contenu en \
Markdown), par exemple "Idée centrale", "Preuve / Dalil", "Développement", \
"Application pratique".
"""

_USER_TEMPLATE = """\
Project: {project_path}

User raw input:
{text}
"""

PROMPTS: dict[str, dict[str, str]] = {
    "capture_markdown": {
        "system": "{system_prompt}\n\n" + _MARKDOWN_FORMAT,
        "user": _USER_TEMPLATE,
    },
    "capture_structured": {
        "system": "{system_prompt}\n\n"
        + _STRUCTURED_FORMAT.format(
            types=", ".join(item.value for item in NoteType),
            status=NOTE_STATUS,
            max_tags=MAX_THEMATIC_TAGS,
            thematic=", ".join(THEMATIC_TAGS),
            min_sections=MIN_SECTIONS,
        ),
        "user": _USER_TEMPLATE,
    },
}

NOTE_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["frontmatter", "title", "sections"],
    "properties": {
        "frontmatter": {
            "type": "object",
            "additionalProperties": False,
            "required": ["type", "status", "source", "tags"],
            "properties": {
                "type": {"type": "string", "enum": [item.value for item in NoteType]},
                "status": {"type": "string", "enum": [NOTE_STATUS]},
                "source": {
                    "type": "string",
                    "description": "Obsidian wikilink source, e.g. "
                    "[[Livre - Les mérites du dhikr]]",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string", "enum": list(THEMATIC_TAGS)},
                    "description": f"Thematic tags (max {MAX_THEMATIC_TAGS})",
                },
            },
        },
        "title": {
            "type": "string",
            "description": "The conceptual title of the note",
        },
        "sections": {
            "type": "array",
            "description": "The body of the note, split into logical sections",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["heading", "content"],
                "properties": {
                    "heading": {"type": "string"},
                    "content": {"type": "string"},
                },
            },
        },
    },
}


def get_prompt(name: str) -> Mapping[str, str]:
    try:
        return PROMPTS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown prompt: {name}") from exc
