"""
Built-in seed catalog.

Written to the persistent store the first time the species collection is
found empty. Ids are stable; catalog order is ascending id.
"""

from snaptheplant.catalog.records import CareTip, SpeciesRecord

PLACEHOLDER = "https://placehold.co/600x400.png"


def _tips(*pairs):
    return tuple(CareTip(title=title, description=description) for title, description in pairs)


SEED_SPECIES = [
    # --- PLANTS ---
    SpeciesRecord(
        id=1, category="Plant", name="Monstera Deliciosa", scientific_name="Monstera deliciosa",
        key_information="A tropical plant famous for its large, glossy, perforated leaves. It is a popular houseplant but toxic to pets.",
        further_reading="https://en.wikipedia.org/wiki/Monstera_deliciosa",
        image=PLACEHOLDER,
        attributes={"color": "green", "shape": "lobed", "size": "medium"},
        is_poisonous=True,
        toxicity_warning="Contains calcium oxalate crystals; chewing the leaves irritates the mouth of cats and dogs.",
        care_tips=_tips(
            ("Watering", "Water when the top few centimetres of soil are dry."),
            ("Sunlight", "Bright, indirect light. Avoid harsh afternoon sun."),
            ("Soil", "Chunky, well-draining aroid mix."),
        ),
    ),
    SpeciesRecord(
        id=2, category="Plant", name="Rose", scientific_name="Rosa",
        key_information="A woody perennial with thorny stems. Cultivated for its beautiful and fragrant flowers. Some varieties produce edible rose hips.",
        further_reading="https://en.wikipedia.org/wiki/Rose",
        image=PLACEHOLDER,
        attributes={"color": "red", "shape": "compound", "size": "small"},
        care_tips=_tips(
            ("Watering", "Deep watering twice a week at the base of the plant."),
            ("Sunlight", "At least six hours of direct sun."),
            ("Fertilizer", "Feed monthly during the growing season."),
        ),
    ),
    SpeciesRecord(
        id=3, category="Plant", name="Sunflower", scientific_name="Helianthus annuus",
        key_information="A large annual flower known for following the sun. Its seeds are a common food source. Caution: Can cause allergies.",
        further_reading="https://en.wikipedia.org/wiki/Helianthus",
        image=PLACEHOLDER,
        attributes={"color": "yellow", "shape": "simple", "size": "large"},
        care_tips=_tips(
            ("Watering", "Keep soil moist while young, then water deeply once a week."),
            ("Sunlight", "Full sun."),
        ),
    ),
    SpeciesRecord(
        id=12, category="Plant", name="Lavender", scientific_name="Lavandula angustifolia",
        key_information="A fragrant herb in the mint family, known for its purple flowers and calming scent. Used in essential oils and culinary arts.",
        further_reading="https://en.wikipedia.org/wiki/Lavandula",
        image=PLACEHOLDER,
        attributes={"color": "blue", "shape": "simple", "size": "small"},
        care_tips=_tips(
            ("Watering", "Drought tolerant once established; let soil dry out."),
            ("Soil", "Sandy, alkaline soil with excellent drainage."),
        ),
    ),

    # --- TREES ---
    SpeciesRecord(
        id=4, category="Tree", name="Oak Tree", scientific_name="Quercus robur",
        key_information="A keystone species in many ecosystems, known for its strength, acorns, and lobed leaves. Supports a high diversity of wildlife.",
        further_reading="https://en.wikipedia.org/wiki/Oak",
        image=PLACEHOLDER,
        attributes={"bark": "rough", "leaf_shape": "lobed", "has_fruit": "yes"},
        care_tips=_tips(("Watering", "Water young trees weekly during dry spells."),),
    ),
    SpeciesRecord(
        id=5, category="Tree", name="Pine Tree", scientific_name="Pinus sylvestris",
        key_information="An evergreen coniferous tree with characteristic needles and cones. Important for timber and paper production.",
        further_reading="https://en.wikipedia.org/wiki/Pine",
        image=PLACEHOLDER,
        attributes={"bark": "rough", "leaf_shape": "needle", "has_fruit": "no"},
        care_tips=_tips(("Soil", "Acidic, well-drained soil."),),
    ),
    SpeciesRecord(
        id=6, category="Tree", name="Paper Birch", scientific_name="Betula papyrifera",
        key_information="A deciduous tree known for its thin, white bark that often peels in paper-like layers. Native to North America.",
        further_reading="https://en.wikipedia.org/wiki/Betula_papyrifera",
        image=PLACEHOLDER,
        attributes={"bark": "peeling", "leaf_shape": "simple", "has_fruit": "no"},
        care_tips=_tips(("Environment", "Prefers cool summers and moist roots."),),
    ),
    SpeciesRecord(
        id=13, category="Tree", name="Japanese Maple", scientific_name="Acer palmatum",
        key_information="A popular ornamental tree known for its striking leaf shapes and vibrant red or purple colors. Native to Asia.",
        further_reading="https://en.wikipedia.org/wiki/Acer_palmatum",
        image=PLACEHOLDER,
        attributes={"bark": "smooth", "leaf_shape": "lobed", "has_fruit": "no"},
        care_tips=_tips(("Sunlight", "Morning sun with afternoon shade."),),
    ),

    # --- WEEDS ---
    SpeciesRecord(
        id=7, category="Weed", name="Dandelion", scientific_name="Taraxacum officinale",
        key_information="An invasive weed with yellow flowers and a deep taproot. The entire plant is edible and has medicinal uses.",
        further_reading="https://en.wikipedia.org/wiki/Taraxacum",
        image=PLACEHOLDER,
        attributes={"flower_color": "yellow", "location": "lawn", "leaf_type": "toothed"},
        care_tips=_tips(("Extra Tips", "Remove the whole taproot to stop regrowth."),),
    ),
    SpeciesRecord(
        id=8, category="Weed", name="White Clover", scientific_name="Trifolium repens",
        key_information="A common lawn weed that fixes nitrogen in the soil. Its white flowers are attractive to bees. Can be invasive in gardens.",
        further_reading="https://en.wikipedia.org/wiki/Trifolium_repens",
        image=PLACEHOLDER,
        attributes={"flower_color": "white", "location": "lawn", "leaf_type": "broad"},
        care_tips=_tips(("Extra Tips", "Raise mowing height to help grass outcompete it."),),
    ),
    SpeciesRecord(
        id=14, category="Weed", name="Crabgrass", scientific_name="Digitaria sanguinalis",
        key_information="An annual weed that spreads quickly in lawns and gardens, especially in summer heat. It outcompetes desired grasses.",
        further_reading="https://en.wikipedia.org/wiki/Digitaria",
        image=PLACEHOLDER,
        attributes={"flower_color": "other", "location": "lawn", "leaf_type": "grassy"},
        care_tips=_tips(("Extra Tips", "Pull before it sets seed in late summer."),),
    ),
    SpeciesRecord(
        id=15, category="Weed", name="Canada Thistle", scientific_name="Cirsium arvense",
        key_information="A persistent and invasive perennial weed with sharp spines on its leaves and purple flowers. Difficult to remove due to its root system.",
        further_reading="https://en.wikipedia.org/wiki/Cirsium_arvense",
        image=PLACEHOLDER,
        attributes={"flower_color": "red", "location": "garden", "leaf_type": "toothed"},
        care_tips=_tips(("Extra Tips", "Wear gloves; repeated cutting exhausts the roots."),),
    ),

    # --- INSECTS ---
    SpeciesRecord(
        id=9, category="Insect", name="Honey Bee", scientific_name="Apis mellifera",
        key_information="A vital pollinator for many crops and wild plants. Social insects living in large colonies. Will sting if threatened.",
        further_reading="https://en.wikipedia.org/wiki/Honey_bee",
        image=PLACEHOLDER,
        attributes={"color": "yellow", "wings": "yes", "legs": "6"},
        is_poisonous=True,
        toxicity_warning="Stings are painful and can cause severe allergic reactions in sensitive people.",
    ),
    SpeciesRecord(
        id=10, category="Insect", name="Carpenter Ant", scientific_name="Camponotus pennsylvanicus",
        key_information="A common pest that excavates wood to build nests, which can cause structural damage to homes. Does not eat wood.",
        further_reading="https://en.wikipedia.org/wiki/Carpenter_ant",
        image=PLACEHOLDER,
        attributes={"color": "other", "wings": "no", "legs": "6"},
    ),
    SpeciesRecord(
        id=11, category="Insect", name="Garden Spider", scientific_name="Argiope aurantia",
        key_information="A common orb-weaver spider, harmless to humans. Known for building large, intricate, circular webs in gardens.",
        further_reading="https://en.wikipedia.org/wiki/Argiope_aurantia",
        image=PLACEHOLDER,
        attributes={"color": "yellow", "wings": "no", "legs": "8"},
    ),
    SpeciesRecord(
        id=16, category="Insect", name="Ladybug", scientific_name="Coccinella septempunctata",
        key_information="A well-known beetle, considered a beneficial insect as it preys on aphids and other garden pests. Many cultures consider it a sign of good luck.",
        further_reading="https://en.wikipedia.org/wiki/Coccinellidae",
        image=PLACEHOLDER,
        attributes={"color": "red", "wings": "yes", "legs": "6"},
    ),

    # --- CACTI ---
    SpeciesRecord(
        id=17, category="Cactus", name="Saguaro", scientific_name="Carnegiea gigantea",
        key_information="A tree-like columnar cactus of the Sonoran Desert that can live for over 150 years.",
        further_reading="https://en.wikipedia.org/wiki/Saguaro",
        image=PLACEHOLDER,
        attributes={"shape": "columnar", "flowers": "yes", "color": "green"},
        care_tips=_tips(
            ("Watering", "Water sparingly; let the soil dry completely between waterings."),
            ("Sunlight", "Full desert sun."),
        ),
    ),
    SpeciesRecord(
        id=18, category="Cactus", name="Prickly Pear", scientific_name="Opuntia ficus-indica",
        key_information="A cactus with flat, paddle-shaped pads and edible fruit known as tuna.",
        further_reading="https://en.wikipedia.org/wiki/Opuntia_ficus-indica",
        image=PLACEHOLDER,
        attributes={"shape": "paddles", "flowers": "yes", "color": "blue-green"},
        care_tips=_tips(("Soil", "Gritty cactus mix."),),
    ),

    # --- SUCCULENTS ---
    SpeciesRecord(
        id=19, category="Succulent", name="Aloe Vera", scientific_name="Aloe vera",
        key_information="A rosette-forming succulent whose gel is widely used to soothe burns.",
        further_reading="https://en.wikipedia.org/wiki/Aloe_vera",
        image=PLACEHOLDER,
        attributes={"color": "green", "leaf_shape": "rosette", "size": "medium"},
        is_poisonous=True,
        toxicity_warning="The latex under the skin of the leaves is toxic to cats and dogs.",
        care_tips=_tips(
            ("Watering", "Water deeply but infrequently."),
            ("Sunlight", "Bright light; some direct sun."),
        ),
    ),
    SpeciesRecord(
        id=20, category="Succulent", name="Jade Plant", scientific_name="Crassula ovata",
        key_information="A long-lived succulent with thick, glossy, paddle-like leaves, often grown as a symbol of good fortune.",
        further_reading="https://en.wikipedia.org/wiki/Crassula_ovata",
        image=PLACEHOLDER,
        attributes={"color": "green", "leaf_shape": "paddle", "size": "small"},
        is_poisonous=True,
        toxicity_warning="Mildly toxic to pets; can cause vomiting.",
        care_tips=_tips(("Watering", "Allow soil to dry out between waterings."),),
    ),

    # --- BIRDS ---
    SpeciesRecord(
        id=21, category="Bird", name="American Robin", scientific_name="Turdus migratorius",
        key_information="A migratory songbird with a rusty-orange breast, often seen hunting earthworms on lawns.",
        further_reading="https://en.wikipedia.org/wiki/American_robin",
        image=PLACEHOLDER,
        attributes={"color": "brown", "size": "medium", "beak_shape": "short"},
    ),
    SpeciesRecord(
        id=22, category="Bird", name="Northern Cardinal", scientific_name="Cardinalis cardinalis",
        key_information="A songbird whose males are a brilliant red; a familiar visitor to backyard feeders.",
        further_reading="https://en.wikipedia.org/wiki/Northern_cardinal",
        image=PLACEHOLDER,
        attributes={"color": "red", "size": "small", "beak_shape": "short"},
    ),
]
