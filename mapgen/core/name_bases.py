"""Default cultural name bases used to train the Markov chains."""

from typing import TYPE_CHECKING, List

from .name_generator import NameBase

if TYPE_CHECKING:
    from .name_generator import NameGenerator

DEFAULT_NAME_BASES: List[NameBase] = [
    NameBase(
        name="German",
        i=0,
        min=5,
        max=12,
        d="lt",
        b=(
            "Achern,Aichhalden,Aitern,Albbruck,Alpirsbach,Altensteig,Althengstett,Appenweier,"
            "Auggen,Badenweiler,Balingen,Bermatingen,Biberach,Bietigheim,Blaubeuren,Bonndorf,"
            "Breisach,Bruchsal,Buchen,Dettingen,Donaueschingen,Eberbach,Ehingen,Ellwangen,"
            "Emmendingen,Endingen,Ettenheim,Freiburg,Friedrichshafen,Furtwangen,Gaggenau,"
            "Geislingen,Gengenbach,Hechingen,Heidelberg,Herrenberg,Hornberg,Kandern,Kehl,"
            "Kenzingen,Lahr,Laufenburg,Lenzkirch,Loffingen,Mosbach,Mullheim,Murrhardt,"
            "Nagold,Oberkirch,Offenburg,Pforzheim,Rastatt,Reutlingen,Schiltach,Staufen,"
            "Tettnang,Todtnau,Triberg,Tuttlingen,Waldkirch,Wertheim,Wolfach"
        ),
    ),
    NameBase(
        name="English",
        i=1,
        min=6,
        max=11,
        d="",
        b=(
            "Abingdon,Alnwick,Ashford,Aylesbury,Banbury,Barnstaple,Bedford,Beverley,Bideford,"
            "Bodmin,Bolton,Bradford,Bridgwater,Buckingham,Cambridge,Canterbury,Carlisle,"
            "Chelmsford,Chester,Chichester,Colchester,Crawley,Darlington,Dorchester,Dover,"
            "Durham,Exeter,Falmouth,Gloucester,Grantham,Guildford,Halifax,Hastings,Hereford,"
            "Huntingdon,Ipswich,Kendal,Lancaster,Launceston,Lincoln,Ludlow,Maidstone,Marlow,"
            "Newbury,Norwich,Oakham,Oxford,Penrith,Reading,Richmond,Rochester,Salisbury,"
            "Shrewsbury,Stafford,Taunton,Truro,Wakefield,Warwick,Wells,Winchester,Worcester"
        ),
    ),
    NameBase(
        name="French",
        i=2,
        min=5,
        max=13,
        d="nlrs",
        b=(
            "Agen,Ajaccio,Albi,Amiens,Angers,Angouleme,Annecy,Arras,Auxerre,Avignon,Bayonne,"
            "Beauvais,Belfort,Besancon,Blois,Bordeaux,Bourges,Brest,Caen,Cahors,Carcassonne,"
            "Chambery,Chartres,Cherbourg,Cognac,Colmar,Dijon,Dole,Epinal,Evreux,Grenoble,"
            "Laval,Limoges,Lorient,Lourdes,Macon,Marseille,Melun,Metz,Montauban,Montpellier,"
            "Nantes,Narbonne,Nevers,Nimes,Niort,Orleans,Pau,Perigueux,Poitiers,Quimper,"
            "Reims,Rennes,Rodez,Rouen,Saintes,Sedan,Toulon,Toulouse,Tours,Troyes,Valence,Vannes"
        ),
    ),
    NameBase(
        name="Italian",
        i=3,
        min=5,
        max=12,
        d="cltr",
        b=(
            "Alessandria,Ancona,Arezzo,Asti,Avellino,Bari,Belluno,Benevento,Bergamo,Bologna,"
            "Brescia,Brindisi,Cagliari,Caserta,Catania,Cesena,Chieti,Como,Cosenza,Cremona,"
            "Cuneo,Ferrara,Firenze,Foggia,Forli,Genova,Grosseto,Imperia,Latina,Lecce,Livorno,"
            "Lucca,Mantova,Massa,Matera,Messina,Modena,Napoli,Novara,Padova,Palermo,Parma,"
            "Pavia,Perugia,Pesaro,Pescara,Piacenza,Pisa,Pistoia,Potenza,Prato,Ravenna,Rieti,"
            "Rimini,Rovigo,Salerno,Sassari,Savona,Siena,Taranto,Teramo,Torino,Trento,Treviso,"
            "Trieste,Udine,Varese,Venezia,Verona,Vicenza,Viterbo"
        ),
    ),
    NameBase(
        name="Castillian",
        i=4,
        min=5,
        max=11,
        d="lr",
        b=(
            "Albacete,Alcala,Alicante,Almeria,Avila,Badajoz,Barbastro,Bilbao,Burgos,Caceres,"
            "Cadiz,Castellon,Ciudad,Cordoba,Cuenca,Daroca,Elche,Estella,Ferrol,Gandia,Girona,"
            "Granada,Guadalajara,Huelva,Huesca,Jaca,Jaen,Jerez,Leon,Lerida,Linares,Logrono,"
            "Lorca,Lugo,Madrid,Malaga,Merida,Motril,Murcia,Orense,Oviedo,Palencia,Pamplona,"
            "Ronda,Salamanca,Santander,Segovia,Sevilla,Soria,Talavera,Tarragona,Teruel,"
            "Toledo,Tortosa,Trujillo,Ubeda,Valencia,Valladolid,Vitoria,Zamora,Zaragoza"
        ),
    ),
    NameBase(
        name="Ruthenian",
        i=5,
        min=5,
        max=10,
        d="",
        b=(
            "Belgorod,Beloozero,Bryansk,Chernigov,Dmitrov,Galich,Gorodets,Ivanovo,Izborsk,"
            "Kaluga,Kasimov,Kiev,Kolomna,Kostroma,Kozelsk,Kursk,Ladoga,Lutsk,Mozhaisk,Murom,"
            "Novgorod,Novotorzhok,Orel,Peremyshl,Pereslavl,Polotsk,Pronsk,Pskov,Putivl,"
            "Rostov,Ryazan,Rzhev,Serpukhov,Smolensk,Staritsa,Starodub,Suzdal,Tambov,Toropets,"
            "Torzhok,Tula,Turov,Tver,Uglich,Vitebsk,Vladimir,Vologda,Vyazma,Yaroslavl,Yelets,"
            "Zaraysk,Zvenigorod"
        ),
    ),
    NameBase(
        name="Nordic",
        i=6,
        min=6,
        max=10,
        d="kln",
        b=(
            "Akureyri,Aldeigja,Alesund,Alvik,Arendal,Askim,Bergen,Bodo,Borg,Bryne,Eidsvoll,"
            "Egersund,Elverum,Fagernes,Farsund,Flekkefjord,Floro,Forde,Gjovik,Grimstad,Halden,"
            "Hamar,Harstad,Haugesund,Hokksund,Holmestrand,Horten,Kirkenes,Kolvereid,Kongsberg,"
            "Kragero,Kristiansand,Larvik,Lillehammer,Lillesand,Mandal,Molde,Mosjoen,Moss,"
            "Namsos,Narvik,Notodden,Orkanger,Porsgrunn,Risor,Sandefjord,Sandnes,Sarpsborg,"
            "Skien,Sortland,Stavanger,Steinkjer,Tonsberg,Tromso,Trondheim,Vadso,Vardo"
        ),
    ),
    NameBase(
        name="Greek",
        i=7,
        min=5,
        max=11,
        d="s",
        b=(
            "Abdera,Abydos,Acanthus,Aegina,Aigai,Amphipolis,Anthemus,Apollonia,Argos,Athenai,"
            "Chalcis,Chios,Corinthos,Cyrene,Delphi,Dodona,Elateia,Elis,Ephesos,Eretria,"
            "Halicarnassus,Heraclea,Knossos,Kos,Larissa,Lindos,Megara,Melos,Messene,Miletos,"
            "Mycenae,Naxos,Nemea,Olympia,Olynthos,Paros,Pella,Pergamon,Phaistos,Pharsalos,"
            "Philippi,Piraeus,Plataea,Potidaea,Rhodos,Samos,Sestos,Sicyon,Sparta,Stagira,"
            "Syracusae,Tegea,Thasos,Thebai,Thermon,Troizen,Tylissos"
        ),
    ),
    NameBase(
        name="Roman",
        i=8,
        min=6,
        max=11,
        d="ls",
        b=(
            "Abila,Aquileia,Aquincum,Arelate,Ariminum,Augusta,Aventicum,Beneventum,Bononia,"
            "Brigantium,Brundisium,Burdigala,Caesarea,Camulodunum,Capua,Carnuntum,Castra,"
            "Colonia,Corduba,Cremona,Durocortorum,Eboracum,Emerita,Florentia,Gades,Genava,"
            "Hispalis,Isca,Lindum,Londinium,Lugdunum,Lutetia,Mediolanum,Moguntiacum,"
            "Narbo,Nemausus,Noviomagus,Ostia,Patavium,Placentia,Pompeii,Ratae,Ravenna,"
            "Salona,Segovia,Singidunum,Sirmium,Tarraco,Tolosa,Treveri,Turicum,Valentia,"
            "Verona,Vindobona,Viroconium"
        ),
    ),
]


def load_default_name_bases(generator: "NameGenerator") -> None:
    """Register the default name bases on a generator."""
    for name_base in DEFAULT_NAME_BASES:
        generator.add_name_base(name_base)
