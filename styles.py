"""Creative style templates and the mood lexicon.

Each style is a fixed scene transformation rendered from three inputs:
the image description, a comma-separated colour list and the aspect ratio.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

# ---------------------------------------------------------------------------
# Mood lexicon
# ---------------------------------------------------------------------------

MOOD_DESCRIPTIONS: Dict[str, str] = {
    "luxury":    "sophisticated, premium, exclusive, refined elegance",
    "energetic": "dynamic, powerful, vibrant, full of energy and movement",
    "minimal":   "clean, simple, elegant, uncluttered with focus on essentials",
    "warm":      "cozy, welcoming, inviting, comfortable and approachable",
    "bold":      "strong, distinctive, daring, makes a powerful statement",
    "natural":   "organic, earthy, authentic, connected to nature",
}

DEFAULT_MOOD_PHRASE = "sophisticated and premium"


def mood_phrase(mood: str) -> str:
    return MOOD_DESCRIPTIONS.get(mood, DEFAULT_MOOD_PHRASE)


# ---------------------------------------------------------------------------
# Aspect ratio phrasing
# ---------------------------------------------------------------------------

LANDSCAPE_PHRASE = "16:9 horizontal"
PORTRAIT_PHRASE = "9:16 vertical"


def format_phrase(aspect_ratio: str) -> str:
    """Anything other than ``portrait`` renders as landscape."""
    return PORTRAIT_PHRASE if aspect_ratio == "portrait" else LANDSCAPE_PHRASE


# ---------------------------------------------------------------------------
# Templates
#
# Placeholders: {description}, {colors}, {framing}.  {framing} expands to
# e.g. "Shot in 16:9 horizontal format".
# ---------------------------------------------------------------------------

_ICE_CUBE = """
Transform this into a subject perfectly suspended inside a massive, crystal-clear ice block. The ice is flawlessly transparent like museum-grade acrylic, with tiny air bubbles trapped inside creating constellations of light. The surface feels perfectly smooth and impossibly cold, with fine frost patterns blooming at the edges where condensation meets frozen surface.

CONCEPT TO TRANSFORM: {description}

The ice block has real weight and presence—corners are sharp and geometric, catching light and throwing rainbow refractions across nearby surfaces. Small cracks run through the ice like lightning frozen in time, each one a perfect prism splitting light into colors that echo {colors}. Water droplets bead on the outside surface, each one a tiny magnifying lens.

The subject inside appears ghosted through the ice—partially obscured by refraction, its edges softened by the dense cold medium. Shadows pool beneath the ice block, deep blue-grey and diffused. The lighting is clinical but beautiful, like a high-end museum display case, with soft highlights dancing across every frozen surface.

The background matches the mood of the input but simplified—neutral tones that let the ice sculpture command attention. {framing}, perfect for premium digital displays.

Make this feel like tangible sculpture—something you could reach out and touch, that would make your fingertips ache with cold. NO text, NO logos, NO frames. This is the final photograph.
"""

_LIQUID_METAL = """
Reimagine this as a living sculpture made of liquid chrome, caught in a single frozen moment. The metal is impossibly smooth and reflective—like mercury pooled on black glass, but defying gravity and frozen mid-splash. Its surface is a perfect mirror, catching distorted reflections of studio lights and the surrounding space.

CONCEPT TO TRANSFORM: {description}

The liquid metal has real physical weight—you can see the tension in how it pulls and forms, thick droplets stretching into strings before breaking. Some drops hover in mid-air, spherical and perfect. The surface tension is visible, that slight curve where liquid meets nothing. Colors shift across the chrome surface in iridescent waves: {colors} bleeding into each other like oil on water.

The metal appears wet and alive, catching light in sharp specular highlights that bloom white-hot against the dark reflective surface. Small ripples frozen across its surface suggest recent movement. Tiny satellite droplets scatter around the main form, each one a perfect chrome sphere reflecting the entire scene in miniature.

Background is pure matte black or deep charcoal grey—the kind of darkness that makes the chrome absolutely pop. Lighting is dramatic and directional, like high-end automotive photography, with rim lights tracing every edge and curve.

{framing}. The feel is tactile and visceral—you can almost feel the cold metallic weight, smell the sharp metallic scent. NO text, NO logos, NO frames. This is the final image.
"""

_FLOATING_FRAGMENTS = """
Break this into hundreds of floating pieces, suspended in a single moment of elegant explosion. Each fragment is geometrically precise—clean edges, sharp angles, like shattered glass caught in zero gravity. They range from large primary chunks down to dust-fine particles, all hanging perfectly still in space.

CONCEPT TO BREAK APART: {description}

The pieces have real dimension and weight. You can see the thickness of each fragment, the way light catches on beveled edges and throws tiny shadows. Some pieces are fully illuminated, others in deep shadow, creating dramatic contrast. Certain fragments glow softly from within, lit with colors that reference {colors}—like stained glass in a dark cathedral.

The explosion pattern is beautiful and intentional—pieces disperse outward in a perfect gradient, dense at the center and diffusing to fine mist at the edges. You can trace the path of each major fragment, see how they relate to their neighbors. Some pieces still connect by thin threads or energy wisps, showing where they just pulled apart.

Background is atmospheric smoke or fog in deep charcoal or navy—just enough to give depth and make the suspended particles visible. Dramatic backlighting creates rim light around fragment edges, making them glow. Front lighting is softer, revealing surface detail and creating that three-dimensional depth.

{framing}. This feels physical and real—you could reach into the scene and touch the floating pieces, feel their cool smooth surfaces. NO text, NO logos, NO frames. This is the final shot.
"""

_UNDERWATER_DREAM = """
Submerge this in crystal-clear water, floating weightless in a dreamlike underwater space. The water is pristine—the kind of clarity you only find in deep pools or tropical reefs. Sunlight penetrates from above in defined shafts, each beam visible through suspended particles and micro-bubbles.

CONCEPT TO SUBMERGE: {description}

Everything moves in slow motion. Fabric or loose elements drift and billow with underwater physics—that graceful, flowing movement unique to submerged objects. Hair or flowing materials create beautiful fluid shapes, backlit and glowing. Small bubbles rise upward in lazy spirals, each one catching and refracting light into tiny prisms.

The water itself has weight and presence. You can see subtle distortion from refraction, that slight blue-green color shift that happens underwater. Caustic light patterns dance across surfaces—those bright, wavy shadows created by sunlight filtering through water's surface. The colors {colors} bleed and diffuse softly through the water medium.

The subject floats in that perfect underwater stillness, suspended in liquid space. Lighting is soft and diffused by the water itself, creating that ethereal glow. Shadows are gentle and blue-tinted. You can almost feel the pressure of the water, the coolness on your skin, the way sound is muffled.

Background matches the input image's mood but filtered through water—hazier, softer, tinged blue-green. {framing}. This feels serene and meditative—tangible but dreamlike. NO text, NO logos, NO frames. This is the final photograph.
"""

_NEON_GLOW = """
Illuminate this with vibrant neon light—the real electric glow of noble gases in glass tubes. The light has that particular quality of neon: intense, almost humming with energy, bleeding and blooming in the atmosphere. Colors are super-saturated and electric: {colors} rendered as pure glowing neon.

CONCEPT TO ILLUMINATE: {description}

The neon creates real physical glow—not just colored light, but that hazy bloom you get in night photography, where bright lights bleed into the surrounding air. Light beams are visible through atmospheric haze, each ray defined and glowing. The glow is strong enough to create colored reflections on nearby surfaces—wet pavement, glossy materials, glass.

The environment feels like a night scene—dark enough that the neon absolutely pops, but with enough ambient light to see forms and shapes. There's atmosphere in the air: light fog or mist that makes the neon beams visible, maybe a slight rain that adds reflections and intensifies colors. You can see the individual neon tubes sometimes—their characteristic linear forms.

Color contrast is extreme: deep blacks and shadows against vibrant, glowing highlights. The light is moody and dramatic, with harsh edges where glow meets shadow. Some areas over-expose into pure white-hot brightness, others drop to complete black—that characteristic high-contrast night look.

Background echoes the input image but pushed into darkness, lit only by neon spill. {framing}. The feeling is electric and alive—you can almost hear the buzz of the transformers, feel the humid night air, smell the ozone. NO text, NO logos, NO frames. This is the final capture.
"""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreativeStyle:
    key: str
    name: str
    description: str
    template: str
    framing_verb: str  # "Shot", "Composed" or "Framed"

    def render(self, description: str, colors: str, aspect_ratio: str) -> str:
        framing = f"{self.framing_verb} in {format_phrase(aspect_ratio)} format"
        return self.template.format(
            description=description,
            colors=colors,
            framing=framing,
        ).strip()


STYLES: Dict[str, CreativeStyle] = {
    s.key: s
    for s in (
        CreativeStyle("iceCube", "Frozen in Ice",
                      "Dramatic ice-block effect", _ICE_CUBE, "Shot"),
        CreativeStyle("liquidMetal", "Liquid Metal",
                      "Flowing chrome and mercury", _LIQUID_METAL, "Composed"),
        CreativeStyle("floatingFragments", "Floating Fragments",
                      "Explodes into pieces", _FLOATING_FRAGMENTS, "Framed"),
        CreativeStyle("underwaterDream", "Underwater Dream",
                      "Submerged in crystal-clear water", _UNDERWATER_DREAM, "Shot"),
        CreativeStyle("neonGlow", "Neon Glow",
                      "Vibrant light trails", _NEON_GLOW, "Composed"),
    )
}

STYLE_KEYS: List[str] = list(STYLES)
DEFAULT_STYLES: List[str] = ["iceCube", "liquidMetal"]


def get_style(key: str) -> CreativeStyle:
    """Return the registered style.  Unknown keys raise ``KeyError``."""
    return STYLES[key]
