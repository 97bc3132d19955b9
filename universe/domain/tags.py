"""Interest tags shared by user profiles and events."""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    MUSIC = "music"
    SPORT = "sport"
    FOOD = "food"
    ART = "art"
    TRAVEL = "travel"
    GAMES = "games"
    TECHNOLOGY = "technology"
    TOPIC = "topic"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Tag(StrEnum):
    """An interest tag.

    The stored value is the lower-case member name; ``display_name`` is what
    the UI (and the AI event generator) use.
    """

    display_name: str
    category: Category

    def __new__(cls, value: str, display_name: str, category: Category) -> Tag:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.display_name = display_name
        obj.category = category
        return obj

    # Music
    JAZZ = "jazz", "Jazz", Category.MUSIC
    POP = "pop", "Pop", Category.MUSIC
    ROCK = "rock", "Rock", Category.MUSIC
    RAP = "rap", "Rap", Category.MUSIC
    CLASSICAL = "classical", "Classical", Category.MUSIC
    BLUES = "blues", "Blues", Category.MUSIC
    METAL = "metal", "Metal", Category.MUSIC
    RNB = "rnb", "R&B", Category.MUSIC
    FUNK = "funk", "Funk", Category.MUSIC
    REGGAE = "reggae", "Reggae", Category.MUSIC
    ELECTRONIC = "electronic", "Electronic", Category.MUSIC
    COUNTRY = "country", "Country", Category.MUSIC
    INDIE = "indie", "Indie", Category.MUSIC
    PUNK = "punk", "Punk", Category.MUSIC
    K_POP = "k_pop", "K-pop", Category.MUSIC
    LIVE_MUSIC = "live_music", "Live music", Category.MUSIC
    CONCERT = "concert", "Concert", Category.MUSIC
    DJ_SET = "dj_set", "DJ set", Category.MUSIC
    OPEN_MIC = "open_mic", "Open mic", Category.MUSIC
    KARAOKE = "karaoke", "Karaoke", Category.MUSIC

    # Sport
    RUNNING = "running", "Running", Category.SPORT
    FITNESS = "fitness", "Fitness", Category.SPORT
    SWIMMING = "swimming", "Swimming", Category.SPORT
    CYCLING = "cycling", "Cycling", Category.SPORT
    MOUNTAIN_BIKING = "mountain_biking", "Mountain biking", Category.SPORT
    HIKING = "hiking", "Hiking", Category.SPORT
    YOGA = "yoga", "Yoga", Category.SPORT
    MEDITATION = "meditation", "Meditation", Category.SPORT
    PILATES = "pilates", "Pilates", Category.SPORT
    JUDO = "judo", "Judo", Category.SPORT
    KARATE = "karate", "Karate", Category.SPORT
    BOXING = "boxing", "Boxing", Category.SPORT
    FOOTBALL = "football", "Football", Category.SPORT
    BASKETBALL = "basketball", "Basketball", Category.SPORT
    VOLLEYBALL = "volleyball", "Volleyball", Category.SPORT
    RUGBY = "rugby", "Rugby", Category.SPORT
    HANDBALL = "handball", "Handball", Category.SPORT
    TENNIS = "tennis", "Tennis", Category.SPORT
    BADMINTON = "badminton", "Badminton", Category.SPORT
    TABLE_TENNIS = "table_tennis", "Table tennis", Category.SPORT
    SKIING = "skiing", "Skiing", Category.SPORT
    SNOWBOARDING = "snowboarding", "Snowboarding", Category.SPORT
    SKATING = "skating", "Skating", Category.SPORT
    SURFING = "surfing", "Surfing", Category.SPORT
    GOLF = "golf", "Golf", Category.SPORT
    KAYAKING = "kayaking", "Kayaking", Category.SPORT
    DANCING = "dancing", "Dancing", Category.SPORT
    HORSEBACK_RIDING = "horseback_riding", "Horseback riding", Category.SPORT

    # Food
    VEGAN = "vegan", "Vegan", Category.FOOD
    VEGETARIAN = "vegetarian", "Vegetarian", Category.FOOD
    HALAL = "halal", "Halal", Category.FOOD
    ITALIAN = "italian", "Italian", Category.FOOD
    ASIAN = "asian", "Asian", Category.FOOD
    INDIAN = "indian", "Indian", Category.FOOD
    MEXICAN = "mexican", "Mexican", Category.FOOD
    LEBANESE = "lebanese", "Lebanese", Category.FOOD
    MEDITERRANEAN = "mediterranean", "Mediterranean", Category.FOOD
    FAST_FOOD = "fast_food", "Fast food", Category.FOOD
    DESSERTS = "desserts", "Desserts", Category.FOOD
    GRILLING = "grilling", "Grilling", Category.FOOD
    HOME_COOKING = "home_cooking", "Home cooking", Category.FOOD
    STREET_FOOD = "street_food", "Street food", Category.FOOD
    CAFES = "cafes", "Cafés", Category.FOOD
    WINE_TASTING = "wine_tasting", "Wine tasting", Category.FOOD
    BEER_TASTING = "beer_tasting", "Beer tasting", Category.FOOD
    COCKTAILS = "cocktails", "Cocktails", Category.FOOD
    BARS = "bars", "Bars", Category.FOOD
    BRUNCH = "brunch", "Brunch", Category.FOOD
    BAKING = "baking", "Baking", Category.FOOD
    COOKING_CLASS = "cooking_class", "Cooking class", Category.FOOD
    FOOD_TRUCKS = "food_trucks", "Food trucks", Category.FOOD
    FARMERS_MARKET = "farmers_market", "Farmers market", Category.FOOD
    FINE_DINING = "fine_dining", "Fine dining", Category.FOOD
    POTLUCK = "potluck", "Potluck", Category.FOOD

    # Art
    DRAWING = "drawing", "Drawing", Category.ART
    PAINTING = "painting", "Painting", Category.ART
    GRAFFITI = "graffiti", "Graffiti", Category.ART
    PHOTOGRAPHY = "photography", "Photography", Category.ART
    SCULPTURE = "sculpture", "Sculpture", Category.ART
    MUSIC = "music", "Music", Category.ART
    THEATER = "theater", "Theater", Category.ART
    CINEMA = "cinema", "Cinema", Category.ART
    DOCUMENTARIES = "documentaries", "Documentaries", Category.ART
    ANIMATION = "animation", "Animation", Category.ART
    POETRY = "poetry", "Poetry", Category.ART
    LITERATURE = "literature", "Literature", Category.ART
    FASHION = "fashion", "Fashion", Category.ART
    ARCHITECTURE = "architecture", "Architecture", Category.ART
    DESIGN = "design", "Design", Category.ART
    UI_UX = "ui_ux", "UI/UX", Category.ART
    DIGITAL_ART = "digital_art", "Digital art", Category.ART
    COMEDY = "comedy", "Comedy", Category.ART
    STAND_UP = "stand_up", "Stand up", Category.ART
    CRAFTS = "crafts", "Crafts", Category.ART
    POTTERY = "pottery", "Pottery", Category.ART
    KNITTING = "knitting", "Knitting", Category.ART
    WOODWORKING = "woodworking", "Woodworking", Category.ART
    MUSEUMS = "museums", "Museums", Category.ART
    GALLERIES = "galleries", "Galleries", Category.ART
    WRITING = "writing", "Writing", Category.ART

    # Travel
    FESTIVALS = "festivals", "Festivals", Category.TRAVEL
    CAMPING = "camping", "Camping", Category.TRAVEL
    BEACH = "beach", "Beach", Category.TRAVEL
    CITY_TRIPS = "city_trips", "City trips", Category.TRAVEL
    ROAD_TRIPS = "road_trips", "Road trips", Category.TRAVEL
    SAFARI = "safari", "Safari", Category.TRAVEL
    BACKPACKING = "backpacking", "Backpacking", Category.TRAVEL
    ADVENTURE_TRAVEL = "adventure_travel", "Adventure travel", Category.TRAVEL
    WELLNESS_RETREATS = "wellness_retreats", "Wellness retreats", Category.TRAVEL
    CULTURAL_TRIPS = "cultural_trips", "Cultural trips", Category.TRAVEL
    SOLO_TRAVEL = "solo_travel", "Solo travel", Category.TRAVEL
    GROUP_TRAVEL = "group_travel", "Group travel", Category.TRAVEL
    BUDGET_TRAVEL = "budget_travel", "Budget travel", Category.TRAVEL
    LUXURY_TRAVEL = "luxury_travel", "Luxury travel", Category.TRAVEL
    VOLUNTEER_TRAVEL = "volunteer_travel", "Volunteer travel", Category.TRAVEL
    CRUISES = "cruises", "Cruises", Category.TRAVEL
    NATIONAL_PARKS = "national_parks", "National parks", Category.TRAVEL
    STAYCATION = "staycation", "Staycation", Category.TRAVEL
    WEEKEND_TRIPS = "weekend_trips", "Weekend trips", Category.TRAVEL

    # Games
    VIDEO_GAMES = "video_games", "Video games", Category.GAMES
    BOARD_GAMES = "board_games", "Board games", Category.GAMES
    CARD_GAMES = "card_games", "Card games", Category.GAMES
    DND = "dnd", "DnD", Category.GAMES
    PUZZLE = "puzzle", "Puzzle", Category.GAMES
    BRAIN_GAMES = "brain_games", "Brain games", Category.GAMES
    ONLINE_GAMES = "online_games", "Online games", Category.GAMES
    CO_OP_GAMES = "co_op_games", "Co-op games", Category.GAMES
    CHESS = "chess", "Chess", Category.GAMES

    # Technology
    PROGRAMMING = "programming", "Programming", Category.TECHNOLOGY
    AI = "ai", "AI", Category.TECHNOLOGY
    MACHINE_LEARNING = "machine_learning", "Machine learning", Category.TECHNOLOGY
    DATA_SCIENCE = "data_science", "Data science", Category.TECHNOLOGY
    CONSOLES = "consoles", "Consoles", Category.TECHNOLOGY
    CRYPTOCURRENCY = "cryptocurrency", "Cryptocurrency", Category.TECHNOLOGY
    CYBERSECURITY = "cybersecurity", "Cybersecurity", Category.TECHNOLOGY
    VR = "vr", "VR", Category.TECHNOLOGY
    ROBOTICS = "robotics", "Robotics", Category.TECHNOLOGY
    CLOUD_COMPUTING = "cloud_computing", "Cloud computing", Category.TECHNOLOGY
    TECH_NEWS = "tech_news", "Tech news", Category.TECHNOLOGY
    STARTUP = "startup", "Startup", Category.TECHNOLOGY

    # Topic
    PHYSICS = "physics", "Physics", Category.TOPIC
    MATHEMATICS = "mathematics", "Mathematics", Category.TOPIC
    CHEMISTRY = "chemistry", "Chemistry", Category.TOPIC
    ASTRONOMY = "astronomy", "Astronomy", Category.TOPIC
    BIOLOGY = "biology", "Biology", Category.TOPIC
    HISTORY = "history", "History", Category.TOPIC
    PHILOSOPHY = "philosophy", "Philosophy", Category.TOPIC
    COMPUTER_SCIENCE = "computer_science", "Computer science", Category.TOPIC
    ECOLOGY = "ecology", "Ecology", Category.TOPIC
    POLITICS = "politics", "Politics", Category.TOPIC
    ECONOMICS = "economics", "Economics", Category.TOPIC
    SOCIOLOGY = "sociology", "Sociology", Category.TOPIC

    @classmethod
    def from_display_name(cls, display_name: str) -> Tag | None:
        return _BY_DISPLAY_NAME.get(display_name.strip().lower())

    @classmethod
    def for_category(cls, category: Category) -> list[Tag]:
        return [tag for tag in cls if tag.category == category]


_BY_DISPLAY_NAME: dict[str, Tag] = {tag.display_name.lower(): tag for tag in Tag}
